"""Parameter checks for reasoning (o1/o3 series) models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ReasoningModelError(ValueError):
    """A request uses a parameter reasoning models do not support."""


class ReasoningModelMaxTokensError(ReasoningModelError):
    def __init__(self) -> None:
        super().__init__(
            "this model is not supported MaxTokens, please use MaxCompletionTokens"
        )


class ReasoningModelLogprobsError(ReasoningModelError):
    def __init__(self) -> None:
        super().__init__("this model has beta-limitations, logprobs not supported")


class ReasoningModelLimitationsError(ReasoningModelError):
    def __init__(self) -> None:
        super().__init__(
            "this model has beta-limitations, temperature, top_p and n are fixed at 1, "
            "while presence_penalty and frequency_penalty are fixed at 0"
        )


def _get(request: Any, name: str, default: Any) -> Any:
    if isinstance(request, Mapping):
        value = request.get(name, default)
    else:
        value = getattr(request, name, default)
    return default if value is None else value


class ReasoningValidator:
    """Checks chat requests aimed at o-series models."""

    def validate(self, request: Any) -> None:
        """Raise a :class:`ReasoningModelError` if the request is not allowed."""
        model = _get(request, "model", "")
        if not (model.startswith("o1") or model.startswith("o3")):
            return
        if _get(request, "max_tokens", 0) > 0:
            raise ReasoningModelMaxTokensError()
        if _get(request, "logprobs", False):
            raise ReasoningModelLogprobsError()
        for name in ("temperature", "top_p", "n"):
            value = _get(request, name, 0)
            if value > 0 and value != 1:
                raise ReasoningModelLimitationsError()
        for name in ("presence_penalty", "frequency_penalty"):
            if _get(request, name, 0) > 0:
                raise ReasoningModelLimitationsError()