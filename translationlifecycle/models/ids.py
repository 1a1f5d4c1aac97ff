from __future__ import annotations
from typing import NewType

DocumentId = NewType("DocumentId", int)
UserId = NewType("UserId", int)
VersionId = NewType("VersionId", int)
CategoryId = NewType("CategoryId", int)
HandoverId = NewType("HandoverId", int)
ReviewId = NewType("ReviewId", int)
