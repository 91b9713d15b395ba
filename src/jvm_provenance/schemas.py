from pathlib import Path
from typing import Annotated, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ArtifactPackage(BaseModel):
    """
    A library artifact identified by its Maven-style coordinates.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["artifact"] = "artifact"
    group: str = Field(min_length=1)
    artifact: str = Field(min_length=1)
    version: str = Field(min_length=1)

    @property
    def coordinates(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


class RuntimePackage(BaseModel):
    """
    The JDK itself, tagged with the runtime major version (e.g. "8", "17").
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["runtime"] = "runtime"
    version: str = Field(min_length=1)

    @property
    def coordinates(self) -> str:
        return f"jdk:{self.version}"


# Closed set of package kinds. Frozen models hash and compare by variant and fields.
Package = Annotated[Union[ArtifactPackage, RuntimePackage], Field(discriminator="kind")]


class DeclaredArtifact(BaseModel):
    """
    A declared dependency together with its resolved location on disk.
    """
    group: str = Field(min_length=1)
    artifact: str = Field(min_length=1)
    version: str = Field(min_length=1)
    path: Path

    @property
    def package(self) -> ArtifactPackage:
        return ArtifactPackage(group=self.group, artifact=self.artifact, version=self.version)


class PackageTableStats(BaseModel):
    """
    Aggregate statistics for a constructed package table.
    """
    total_classfiles: int
    packages_indexed: int
    classfiles_per_package: Dict[str, int] = Field(default_factory=dict)
    jdk_memo_size: int = 0
    emitted_packages: int = 0
    legacy_runtime: bool
    runtime_version: str
