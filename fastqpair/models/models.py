from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

from fastqpair.core.constants import (
    DEFAULT_DUPLICATE_POLICY,
    DEFAULT_METHOD,
    PAIRED_R1_NAME,
    PAIRED_R2_NAME,
    SINGLETONS_NAME,
    DuplicatePolicy,
    PairingMethod,
)
from fastqpair.core.utils import check_output_directory, gzipped_path

# =============================================================================
# Results
# =============================================================================


@dataclass
class PairingStats:
    """Counters collected while pairing."""

    pairs: int = 0
    singletons_read1: int = 0
    singletons_read2: int = 0
    duplicates: int = 0

    @property
    def singletons(self) -> int:
        return self.singletons_read1 + self.singletons_read2


@dataclass
class PairingOutput:
    """Paths written by a pairing run. ``singleton_path`` is None when no record was unpaired."""

    paired1_path: Path
    paired2_path: Path
    singleton_path: Path | None = None
    stats: PairingStats | None = None


# =============================================================================
# Configuration
# =============================================================================


class OutputPaths(BaseModel):
    """Destinations of the two paired files and the singleton file."""

    paired1: Path
    paired2: Path
    singletons: Path

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @classmethod
    def in_directory(cls, directory: Path) -> OutputPaths:
        """Use the default file names inside ``directory``."""
        return cls(
            paired1=directory / PAIRED_R1_NAME,
            paired2=directory / PAIRED_R2_NAME,
            singletons=directory / SINGLETONS_NAME,
        )

    def as_list(self) -> list[Path]:
        return [self.paired1, self.paired2, self.singletons]

    @model_validator(mode="after")
    def validate_distinct(self) -> OutputPaths:
        """The three outputs must not overwrite each other."""
        if len({p.resolve() for p in self.as_list()}) != 3:
            raise ValueError("Paired and singleton outputs must be three different files.")
        return self


class PairingConfig(BaseModel):
    """Pydantic model for a pairing run."""

    read1: Path
    read2: Path
    method: PairingMethod = DEFAULT_METHOD
    output_dir: Path | None = None
    output_paths: OutputPaths | None = None
    gzip: bool = False
    duplicate_policy: DuplicatePolicy = DEFAULT_DUPLICATE_POLICY
    strict: bool = False
    force: bool = False
    tmpdir: Path | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_and_configure(self) -> PairingConfig:
        # Check input file existence
        if not self.read1.is_file():
            raise ValueError(f"The file specified as r1 ({self.read1}) does not exist.")
        if not self.read2.is_file():
            raise ValueError(f"The file specified as r2 ({self.read2}) does not exist.")
        if self.read1.resolve() == self.read2.resolve():
            raise ValueError("Read1 and read2 must be different files.")

        # Outputs default to the directory holding read1
        if self.output_paths is None:
            if self.output_dir is None:
                self.output_dir = self.read1.parent
            self.output_dir = Path(check_output_directory(str(self.output_dir)))
            self.output_paths = OutputPaths.in_directory(self.output_dir)
        else:
            for path in self.output_paths.as_list():
                check_output_directory(str(path.parent))

        inputs = {self.read1.resolve(), self.read2.resolve()}
        for path in self.output_paths.as_list():
            if path.resolve() in inputs:
                raise ValueError(f"Output file {path} would overwrite an input file.")

        # Check for existing output files
        existing = [p for p in self._final_paths() if p.is_file()]
        if existing:
            if not self.force:
                raise ValueError(f"The file {existing[0]} already exists. Overwrite by setting force=True")
            for path in existing:
                path.unlink()

        return self

    def _final_paths(self) -> list[Path]:
        assert self.output_paths is not None
        paths = self.output_paths.as_list()
        if self.gzip:
            paths = paths + [gzipped_path(p) for p in paths]
        return paths
