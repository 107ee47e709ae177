from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class AbstractEmbedder(ABC):
    """Turns texts into L2-normalized vectors so a dot product is a cosine."""

    dim: int

    @abstractmethod
    def embed(self, texts: list[str]) -> np.ndarray:
        """Embed a batch of texts.

        Returns:
            float32 array of shape ``(len(texts), dim)``. Rows are unit length,
            or all zeros for texts with no usable tokens.
        """
        raise NotImplementedError
