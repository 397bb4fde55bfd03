from inspect import FullArgSpec, getfile, getfullargspec, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    MASK,
    MAX_CONTENT_LENGTH,
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


# Matches key=value and "key": "value" pairs whose key is sensitive
_SENSITIVE_PAIR_PATTERN = re.compile(
    r"""(['"]?(?:%s)['"]?\s*[:=]\s*)(['"])(.*?)\2"""
    % '|'.join(re.escape(k) for k in sorted(SENSITIVE_KEYWORDS, key=len, reverse=True)),
    re.IGNORECASE,
)


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    try:
        lineno = getsourcelines(func)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(getattr(func, "__func__", func)))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = max(call_depth_var.get() - 1, 0)
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def normalize_args_kwargs(
    func: Callable[..., Any], *args: Any, **kwargs: Any
) -> tuple[tuple[Any, ...], dict[Any, Any]]:
    """Drop kwargs the wrapped function cannot accept (FastAPI may pass extras)."""
    if hasattr(func, '__wrapped__'):
        func = func.__wrapped__  # type: ignore
    full_arg_spec: FullArgSpec = getfullargspec(func)

    if not full_arg_spec.varkw:
        kw_list: list[str] = full_arg_spec.args + full_arg_spec.kwonlyargs
        kwargs = {k: v for k, v in kwargs.items() if k in kw_list}

    return args, kwargs


def mask_sensitive(data: Any) -> Any:
    if not isinstance(data, str):
        return data
    return _SENSITIVE_PAIR_PATTERN.sub(rf'\1\2{MASK}\2', data)


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    if isinstance(keyword, str) and keyword.lower() in SENSITIVE_KEYWORDS:
        return MASK
    return value


def truncate_content(data: Any, max_length: int = MAX_CONTENT_LENGTH) -> Any:
    text = data if isinstance(data, str) else repr(data)
    if len(text) <= max_length:
        return data
    return f'{text[:max_length]}... ({len(text) - max_length} more chars)'
