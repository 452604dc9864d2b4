from __future__ import annotations

from typing import Callable

import pytest

from mergegen.sections.markers import DEFAULT_STYLE, MarkerStyle
from tests._fixtures.blobs import BlobBuilder


@pytest.fixture
def blob() -> Callable[..., BlobBuilder]:
    """Provide a factory for marker-aware blob builders."""

    def _factory(style: MarkerStyle = DEFAULT_STYLE) -> BlobBuilder:
        return BlobBuilder(style)

    return _factory
