from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import httpx
import pytest

from mavengrab.modules.grape.domain import Repository
from mavengrab.settings import Settings

CENTRAL = "https://central.test/maven2"
MIRROR = "https://mirror.test/releases"


def dep(
    group: str,
    module: str,
    version: Optional[str] = None,
    *,
    scope: Optional[str] = None,
    optional: bool = False,
    type: Optional[str] = None,
    exclusions: Sequence[tuple] = (),
) -> str:
    parts = [f"<groupId>{group}</groupId>", f"<artifactId>{module}</artifactId>"]
    if version:
        parts.append(f"<version>{version}</version>")
    if type:
        parts.append(f"<type>{type}</type>")
    if scope:
        parts.append(f"<scope>{scope}</scope>")
    if optional:
        parts.append("<optional>true</optional>")
    if exclusions:
        excl = "".join(
            f"<exclusion><groupId>{g}</groupId><artifactId>{m}</artifactId></exclusion>" for g, m in exclusions
        )
        parts.append(f"<exclusions>{excl}</exclusions>")
    return f"<dependency>{''.join(parts)}</dependency>"


def pom(
    group: Optional[str],
    module: str,
    version: Optional[str],
    dependencies: Iterable[str] = (),
    *,
    parent: Optional[tuple] = None,
    properties: Optional[Dict[str, str]] = None,
    managed: Iterable[str] = (),
    packaging: Optional[str] = None,
) -> bytes:
    body = ['<project xmlns="http://maven.apache.org/POM/4.0.0">', "<modelVersion>4.0.0</modelVersion>"]
    if parent:
        g, m, v = parent
        body.append(f"<parent><groupId>{g}</groupId><artifactId>{m}</artifactId><version>{v}</version></parent>")
    if group:
        body.append(f"<groupId>{group}</groupId>")
    body.append(f"<artifactId>{module}</artifactId>")
    if version:
        body.append(f"<version>{version}</version>")
    if packaging:
        body.append(f"<packaging>{packaging}</packaging>")
    if properties:
        body.append("<properties>" + "".join(f"<{k}>{v}</{k}>" for k, v in properties.items()) + "</properties>")
    managed = list(managed)
    if managed:
        body.append("<dependencyManagement><dependencies>" + "".join(managed) + "</dependencies></dependencyManagement>")
    deps = list(dependencies)
    if deps:
        body.append("<dependencies>" + "".join(deps) + "</dependencies>")
    body.append("</project>")
    return "".join(body).encode()


def metadata(group: str, module: str, versions: Sequence[str]) -> bytes:
    listed = "".join(f"<version>{v}</version>" for v in versions)
    return (
        f"<metadata><groupId>{group}</groupId><artifactId>{module}</artifactId>"
        f"<versioning><release>{versions[-1]}</release><versions>{listed}</versions></versioning></metadata>"
    ).encode()


class FakeMavenServer:
    """Serves Maven-layout files for any number of repository base urls."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.requests: List[str] = []
        self.broken: Dict[str, int] = {}

    def put(self, repo_url: str, path: str, content: bytes) -> None:
        self.files[f"{repo_url.rstrip('/')}/{path}"] = content

    def add_artifact(
        self,
        group: str,
        module: str,
        version: str,
        dependencies: Iterable[str] = (),
        *,
        repo_url: str = CENTRAL,
        packaging: str = "jar",
        **pom_kwargs,
    ) -> None:
        base = f"{group.replace('.', '/')}/{module}/{version}/{module}-{version}"
        self.put(repo_url, f"{base}.pom", pom(group, module, version, dependencies, **pom_kwargs))
        if packaging != "pom":
            self.put(repo_url, f"{base}.{packaging}", f"{group}:{module}:{version}".encode())

    def add_pom_only(self, group: str, module: str, version: str, content: bytes, *, repo_url: str = CENTRAL) -> None:
        self.put(repo_url, f"{group.replace('.', '/')}/{module}/{version}/{module}-{version}.pom", content)

    def add_metadata(self, group: str, module: str, versions: Sequence[str], *, repo_url: str = CENTRAL) -> None:
        self.put(repo_url, f"{group.replace('.', '/')}/{module}/maven-metadata.xml", metadata(group, module, versions))

    def fail(self, repo_url: str, status: int = 500) -> None:
        self.broken[repo_url.rstrip("/")] = status

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        for base, status in self.broken.items():
            if url.startswith(base):
                return httpx.Response(status)
        content = self.files.get(url)
        if content is None:
            return httpx.Response(404)
        return httpx.Response(200, content=content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def downloads(self, suffix: str = ".jar") -> List[str]:
        return [url for url in self.requests if url.endswith(suffix)]


@pytest.fixture
def server() -> FakeMavenServer:
    return FakeMavenServer()


@pytest.fixture
def central() -> Repository:
    return Repository(id="central", url=CENTRAL)


@pytest.fixture
def mirror() -> Repository:
    return Repository(id="mirror", url=MIRROR)


def build_settings(tmp_path: Path, **overrides) -> Settings:
    defaults = {
        "grape_repositories": [f"central={CENTRAL}"],
        "grape_local_repository": str(tmp_path / "m2"),
        "grape_progress_initial_delay": 0.0,
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)
