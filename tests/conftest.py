"""Shared test fixtures: small Rust source units and structural records."""

import pytest

from design_insight.models import ModuleStructure
from design_insight.scanning import RustParser


DEEP_MODULE = """\
use std::collections::HashMap;

pub const MAX_ITEMS: usize = 64;

pub struct Cache {
    items: HashMap<String, u32>,
}

impl Cache {
    pub fn new() -> Self {
        Cache { items: HashMap::new() }
    }

    pub fn insert(&mut self, key: String, value: u32) -> Option<u32> {
        if self.items.len() >= MAX_ITEMS {
            self.evict();
        }
        self.items.insert(key, value)
    }

    fn evict(&mut self) {
        let mut oldest = None;
        for (key, value) in self.items.iter() {
            match oldest {
                None => {
                    oldest = Some((key.clone(), *value));
                }
                _ => {}
            }
        }
        if let Some((key, _)) = oldest {
            self.items.remove(&key);
        }
    }
}
"""

DELEGATING_MODULE = """\
pub struct Service {
    repo: Repository,
    client: Client,
    inner: Inner,
    name: String,
    handler: fn(Message),
}

impl Service {
    pub fn find_user(&self, id: u64) -> Option<User> {
        self.repo.find_user(id)
    }

    pub fn save(&self, user: User, force: bool) -> Result<(), Error> {
        self.repo.save(user, force)?;
        Ok(())
    }

    pub fn load(&self, id: u64) -> Result<User, Error> {
        self.repo.load(id)?
    }

    pub async fn fetch(&self, url: String, retries: u32) -> Response {
        self.client.fetch(url, retries).await
    }

    pub fn partial(&self, a: u32, b: u32, c: u32) -> u32 {
        compute(a)
    }

    pub fn ping(&self) -> bool {
        self.inner.ping()
    }

    fn as_str(&self) -> &str {
        self.name.as_str()
    }

    pub fn dispatch(&self, msg: Message) {
        (self.handler)(msg)
    }
}

impl Handler for Service {
    fn handle(&self, request: Request) -> Response {
        self.inner.handle(request)
    }
}

pub fn parse_config(text: &str) -> Config {
    config::parse(text)
}

pub fn decode_all(bytes: &[u8]) -> Vec<Item> {
    codec::decode::<Item>(bytes)
}

pub(crate) fn helper(value: u32) -> u32 {
    value + 1
}
"""

COUPLED_MODULE = """\
use std::collections::HashMap;
use crate::model::{User, Role};

const LIMIT: u32 = 42;

pub fn register(name: String, age: u32, role: Role, active: bool, score: f64) -> User {
    let retries = 3;
    let ratio = 0.5;
    let offset = -7;
    User::new(name, age, role, active, score)
}
"""

LIFECYCLE_MODULE = """\
impl Connection {
    fn initialize(&mut self) {
        self.ready = true;
    }

    fn process(&mut self) {
        if self.is_initialized() {
            self.handle_request();
        }
    }

    fn cleanup(&mut self) {
        self.close();
    }
}
"""

BUILDER_MODULE = """\
impl ServerBuilder {
    pub fn new() -> Self {
        ServerBuilder::default()
    }

    pub fn host(mut self, host: String) -> Self {
        self.host = host;
        self
    }

    pub fn port(mut self, port: u16) -> Self {
        self.port = port;
        self
    }

    pub fn tls(self, enabled: bool) -> Self {
        Self { tls: enabled, ..self }
    }

    pub fn build(self) -> Server {
        Server::from(self)
    }
}
"""

BROKEN_SOURCE = "pub fn broken( {\n    encode(decode(\n"


@pytest.fixture
def parser():
    """A fresh Rust parser."""
    return RustParser()


@pytest.fixture
def deep_source():
    return DEEP_MODULE


@pytest.fixture
def delegating_source():
    return DELEGATING_MODULE


@pytest.fixture
def coupled_source():
    return COUPLED_MODULE


@pytest.fixture
def lifecycle_source():
    return LIFECYCLE_MODULE


@pytest.fixture
def builder_source():
    return BUILDER_MODULE


@pytest.fixture
def broken_source():
    return BROKEN_SOURCE


@pytest.fixture
def structure():
    """Structural record for a module with two dependencies."""
    return ModuleStructure(
        name="cache",
        path="src/cache.rs",
        public_type_count=1,
        private_type_count=2,
        external_deps=["serde"],
        internal_deps=["crate::model"],
    )


@pytest.fixture
def rust_project(tmp_path):
    """Four modules: three readable units on disk and one missing file."""
    (tmp_path / "cache.rs").write_text(DEEP_MODULE, encoding="utf-8")
    (tmp_path / "service.rs").write_text(DELEGATING_MODULE, encoding="utf-8")
    (tmp_path / "lifecycle.rs").write_text(LIFECYCLE_MODULE, encoding="utf-8")
    return {
        "cache": ModuleStructure(name="cache", path=str(tmp_path / "cache.rs"), public_type_count=1),
        "service": ModuleStructure(
            name="service",
            path=str(tmp_path / "service.rs"),
            public_type_count=1,
            internal_deps=["crate::repo", "crate::client"],
        ),
        "lifecycle": ModuleStructure(name="lifecycle", path=str(tmp_path / "lifecycle.rs")),
        "missing": ModuleStructure(
            name="missing", path=str(tmp_path / "missing.rs"), public_type_count=3
        ),
    }
