"""Checks that a path can be written safely on the host operating system."""

import re
import sys

from text_edit.text_edit_exceptions import UnsafePathError


_RESERVED_DEVICE_NAMES = frozenset(
    ['CON', 'PRN', 'AUX', 'NUL'] +
    [f'COM{i}' for i in range(1, 10)] +
    [f'LPT{i}' for i in range(1, 10)]
)

_INVALID_WINDOWS_CHARS = re.compile(r'[<>"|?*\x00-\x1f]')
_DRIVE_LETTER = re.compile(r'^[A-Za-z]:$')
_SHORT_FILENAME = re.compile(r'~\d')


def _fail(path: str, reason: str) -> None:
    raise UnsafePathError(f"Unsafe path '{path}': {reason}", path, {'reason': reason})


def _check_windows_component(path: str, component: str, index: int) -> None:
    """
    Check a single path component against Windows naming rules.

    Args:
        path: Full path, for error reporting
        component: Path component to check
        index: Position of the component in the path

    Raises:
        UnsafePathError: If the component is not safe
    """
    if index == 0 and _DRIVE_LETTER.match(component):
        return

    if ':' in component:
        _fail(path, f"component '{component}' contains ':' (alternate data stream)")

    if _INVALID_WINDOWS_CHARS.search(component):
        _fail(path, f"component '{component}' contains characters that are invalid on Windows")

    if component in ('.', '..'):
        return

    if component.endswith(('.', ' ')):
        _fail(path, f"component '{component}' ends with a dot or a space")

    base = component.split('.', 1)[0].upper()
    if base in _RESERVED_DEVICE_NAMES:
        _fail(path, f"component '{component}' is a reserved device name")

    if _SHORT_FILENAME.search(component):
        _fail(path, f"component '{component}' looks like an 8.3 short filename")


def assert_path_is_safe(path: str, is_windows: bool | None = None) -> None:
    """
    Check that a path does not rely on filesystem tricks to reach unexpected files.

    On every platform a path must not contain a null byte.  On Windows a path
    must also avoid device path prefixes, alternate data streams, reserved
    device names, characters Windows rejects, components with a trailing dot
    or space, and 8.3 short filenames, all of which can make a path resolve
    somewhere other than where it appears to point.

    Args:
        path: Path to check
        is_windows: Apply Windows rules; defaults to whether we're running on Windows

    Raises:
        UnsafePathError: If the path is not safe
    """
    if '\0' in path:
        _fail(path, 'path contains a null byte')

    if is_windows is None:
        is_windows = sys.platform == 'win32'

    if not is_windows:
        return

    if path.startswith(('\\\\?\\', '\\\\.\\', '//?/', '//./')):
        _fail(path, 'device paths are not allowed')

    components = [component for component in re.split(r'[\\/]', path) if component]
    for index, component in enumerate(components):
        _check_windows_component(path, component, index)
