from pathlib import Path

from .manifest import ProjectManifest

SOURCE_SUFFIX = ".sm"


def discover_sm_files(manifest: ProjectManifest) -> list[Path]:
    files: list[Path] = []
    for base in manifest.source_paths:
        base = base.resolve()
        if not base.exists():
            continue
        if base.is_file():
            if base.suffix == SOURCE_SUFFIX:
                files.append(base)
            continue
        for p in base.rglob(f"*{SOURCE_SUFFIX}"):
            files.append(p)
    return sorted(set(files))
