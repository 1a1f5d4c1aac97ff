"""Worker ids and sample content used across the lifecycle tests."""
from __future__ import annotations

ALICE, BOB, ADMIN = 1, 2, 9

NAMES = {ALICE: "Alice", BOB: "Bob", ADMIN: "Admin"}

ORIGINAL_HTML = "".join(f"<p>Paragraph {i}</p>" for i in range(5))
