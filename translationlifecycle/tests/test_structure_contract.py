"""Structure contract tests for the translation lifecycle feature."""
from __future__ import annotations

from pathlib import Path


def test_structure_contract() -> None:
    """Fail if required scaffold files are missing."""
    root = Path(__file__).resolve().parents[1]
    required = [
        root / "models" / "document_status.py",
        root / "models" / "version_type.py",
        root / "models" / "translation_lock.py",
        root / "models" / "handover.py",
        root / "models" / "review.py",
        root / "exceptions" / "errors.py",
        root / "logic" / "content" / "paragraph_counter.py",
        root / "logic" / "policy" / "version_resolver.py",
        root / "logic" / "policy" / "lifecycle_policy.py",
        root / "logic" / "policy" / "progress_policy.py",
        root / "logic" / "repository" / "unit_of_work.py",
        root / "logic" / "repository" / "sqlite" / "base_sqlite_repo.py",
        root / "logic" / "services" / "lock_manager.py",
        root / "logic" / "services" / "handover_service.py",
        root / "logic" / "services" / "review_service.py",
        root / "logic" / "services" / "lifecycle_service.py",
        root / "logic" / "adapters" / "identity_provider.py",
        root / "factory.py",
    ]
    missing = [path for path in required if not path.exists()]
    assert not missing, f"Missing required files: {missing}"
