"""Run configuration for a k-NN job."""

from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_THREADS = 2
DEFAULT_REFERENCE_FILE = "reference.pts"
DEFAULT_DISTANCE_FILE = "distances.dat"
DEFAULT_INDEX_FILE = "indices.dat"


@dataclass
class KnnConfig:
    """Options for one run over a reference file and a fitting file."""

    k: int | None = None
    vector_size: int | None = None
    threads: int = DEFAULT_THREADS
    reference_file: str = DEFAULT_REFERENCE_FILE
    fit_file: str | None = None
    distance_file: str = DEFAULT_DISTANCE_FILE
    index_file: str = DEFAULT_INDEX_FILE
    metric: str = "euclidean"
    progress: bool = True

    @property
    def fitting_path(self) -> str:
        """The fitting file, falling back to the reference file."""
        return self.fit_file if self.fit_file is not None else self.reference_file

    def missing(self) -> list[str]:
        """Names of required options that were not supplied."""
        missing = []
        if self.k is None:
            missing.append("knn")
        if self.vector_size is None:
            missing.append("size")
        return missing

    def validate(self) -> "KnnConfig":
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                "Required options not supplied: " + ", ".join(f"--{m}" for m in missing)
            )
        for name in ("k", "vector_size", "threads"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        return self

    def as_rows(self) -> list[tuple[str, object]]:
        """(name, value) pairs echoed before a run starts."""
        return [
            ("threads", self.threads),
            ("knn", self.k),
            ("size", self.vector_size),
            ("reference-file", self.reference_file),
            ("fit-file", self.fitting_path),
            ("distance-file", self.distance_file),
            ("index-file", self.index_file),
        ]
