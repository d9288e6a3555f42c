"""
Proxy Configuration Document

Typed model of the proxy engine's declarative configuration. One document
exists per agent; it is the unit of persistence and distribution.

Serialized with the engine's camelCase keys and without unset fields.
Sections the compiler never touches are modeled for completeness and
preserved verbatim on load/save.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConfigModel(BaseModel):
    """Base for all document sections."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TLS(ConfigModel):
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    secure: Optional[bool] = None
    server_name: Optional[str] = None


class Auth(ConfigModel):
    username: Optional[str] = None
    password: Optional[str] = None


class SockOpts(ConfigModel):
    mark: Optional[int] = None  # SO_MARK


class Selector(ConfigModel):
    strategy: Optional[str] = None
    max_fails: Optional[int] = None
    fail_timeout: Optional[str] = None


class Connector(ConfigModel):
    type: str
    auth: Optional[Auth] = None
    metadata: Optional[Dict[str, Any]] = None


class Dialer(ConfigModel):
    type: str
    auth: Optional[Auth] = None
    tls: Optional[TLS] = None
    metadata: Optional[Dict[str, Any]] = None


class Node(ConfigModel):
    name: str
    addr: str
    interface: Optional[str] = None
    sockopts: Optional[SockOpts] = None
    bypass: Optional[str] = None
    connector: Optional[Connector] = None
    dialer: Optional[Dialer] = None


class Hop(ConfigModel):
    name: str
    interface: Optional[str] = None
    sockopts: Optional[SockOpts] = None
    selector: Optional[Selector] = None
    bypass: Optional[str] = None
    nodes: List[Node] = Field(default_factory=list)


class Chain(ConfigModel):
    name: str
    selector: Optional[Selector] = None
    hops: List[Hop] = Field(default_factory=list)


class Forwarder(ConfigModel):
    nodes: List[Node] = Field(default_factory=list)
    selector: Optional[Selector] = None


class Handler(ConfigModel):
    type: str
    auther: Optional[str] = None
    auth: Optional[Auth] = None
    chain: Optional[str] = None
    retries: Optional[int] = None
    observer: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class Listener(ConfigModel):
    type: str
    chain: Optional[str] = None
    auther: Optional[str] = None
    auth: Optional[Auth] = None
    tls: Optional[TLS] = None
    metadata: Optional[Dict[str, Any]] = None


class Service(ConfigModel):
    name: str
    addr: str
    interface: Optional[str] = None
    sockopts: Optional[SockOpts] = None
    admission: Optional[str] = None
    bypass: Optional[str] = None
    resolver: Optional[str] = None
    hosts: Optional[str] = None
    handler: Handler
    listener: Listener
    forwarder: Optional[Forwarder] = None
    observer: Optional[str] = None
    limiter: Optional[str] = None
    rlimiter: Optional[str] = None
    climiter: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class Plugin(ConfigModel):
    type: str
    addr: str
    tls: Optional[TLS] = None
    timeout: Optional[int] = None
    token: Optional[str] = None


class Observer(ConfigModel):
    name: str
    plugin: Plugin


class Auther(ConfigModel):
    name: str
    auths: List[Auth] = Field(default_factory=list)


class Admission(ConfigModel):
    name: str
    whitelist: Optional[bool] = None
    matchers: List[str] = Field(default_factory=list)


class Bypass(ConfigModel):
    name: str
    whitelist: Optional[bool] = None
    matchers: List[str] = Field(default_factory=list)


class Nameserver(ConfigModel):
    addr: str
    chain: Optional[str] = None
    prefer: Optional[str] = None
    client_ip: Optional[str] = Field(default=None, alias="clientIP")
    ttl: Optional[str] = None
    timeout: Optional[str] = None


class Resolver(ConfigModel):
    name: str
    nameservers: List[Nameserver] = Field(default_factory=list)


class Mapping(ConfigModel):
    ip: str
    hostname: str
    aliases: Optional[List[str]] = None


class Hosts(ConfigModel):
    name: str
    mappings: List[Mapping] = Field(default_factory=list)


class LogRotation(ConfigModel):
    max_size: Optional[int] = None
    max_age: Optional[int] = None
    max_backups: Optional[int] = None
    local_time: Optional[bool] = None
    compress: Optional[bool] = None


class Log(ConfigModel):
    level: Optional[str] = None
    format: Optional[str] = None
    output: Optional[str] = None
    rotation: Optional[LogRotation] = None


class Profiling(ConfigModel):
    addr: Optional[str] = None
    enabled: Optional[bool] = None


class APIConfig(ConfigModel):
    addr: Optional[str] = None
    path_prefix: Optional[str] = None
    accesslog: Optional[bool] = None
    auth: Optional[Auth] = None
    auther: Optional[str] = None


class Metrics(ConfigModel):
    addr: Optional[str] = None
    path: Optional[str] = None


class Limiter(ConfigModel):
    name: str
    limits: List[str] = Field(default_factory=list)


class ProxyConfigDocument(ConfigModel):
    """
    Per-agent proxy engine configuration.

    Invariants maintained by the compiler:
        - every service is named ``forward-<id>``
        - every chain is named ``chain-<id>``
        - a chain exists iff its forward is not direct tcp
    """

    services: Optional[List[Service]] = None
    chains: Optional[List[Chain]] = None
    authers: Optional[List[Auther]] = None
    admissions: Optional[List[Admission]] = None
    bypasses: Optional[List[Bypass]] = None
    resolvers: Optional[List[Resolver]] = None
    hosts: Optional[List[Hosts]] = None
    tls: Optional[TLS] = None
    log: Optional[Log] = None
    profiling: Optional[Profiling] = None
    api: Optional[APIConfig] = None
    metrics: Optional[Metrics] = None
    observers: Optional[List[Observer]] = None
    limiters: Optional[List[Limiter]] = None
    rlimiters: Optional[List[Limiter]] = None
    climiters: Optional[List[Limiter]] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ProxyConfigDocument":
        """Load a stored document; a missing document is an empty one."""
        return cls.model_validate(data or {})

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def service_names(self) -> list[str]:
        return [s.name for s in self.services or []]

    def chain_names(self) -> list[str]:
        return [c.name for c in self.chains or []]

    def get_service(self, name: str) -> Optional[Service]:
        for service in self.services or []:
            if service.name == name:
                return service
        return None

    def get_chain(self, name: str) -> Optional[Chain]:
        for chain in self.chains or []:
            if chain.name == name:
                return chain
        return None
