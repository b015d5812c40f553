"""Utility functions for the CLI"""

import functools
import re
from typing import Tuple

import click
from docker.errors import DockerException

from .exceptions import LikeError, ValidationError


RESOURCE_KINDS = {
    'container': 'container',
    'containers': 'container',
    'service': 'service',
    'services': 'service',
    'svc': 'service',
}

_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(ms|s|m|h)')
_DURATION_UNITS = {'ms': 0.001, 's': 1, 'm': 60, 'h': 3600}


def parse_resource(arg: str) -> Tuple[str, str]:
    """Split ``NAME`` or ``TYPE/NAME`` into (kind, name)"""
    if '/' not in arg:
        return 'container', arg

    kind, name = arg.split('/', 1)
    mapped_kind = RESOURCE_KINDS.get(kind.lower())
    if not mapped_kind:
        raise ValidationError(f"unknown resource type: {kind}")
    if not name:
        raise ValidationError(f"resource name may not be empty: {arg}")
    return mapped_kind, name


def parse_duration(value: str) -> float:
    """Parse durations like ``5s``, ``2m``, ``1h30m`` into seconds"""
    value = value.strip()
    sign = 1
    if value[:1] in ('-', '+'):
        sign = -1 if value[0] == '-' else 1
        value = value[1:]
    if value == '0':
        return 0.0

    position = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(value):
        raise ValidationError(f"invalid duration {value!r}, expected something like 5s, 2m or 3h")
    return sign * seconds


def error_handler(func):
    """Decorator that reports errors the way kubectl does: one line, exit 1"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (LikeError, DockerException) as e:
            click.echo(f"error: {e}", err=True)
            ctx = click.get_current_context()
            ctx.exit(1)

    return wrapper
