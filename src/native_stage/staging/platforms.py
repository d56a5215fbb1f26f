"""Platform tags and native library naming conventions."""

import platform
from typing import List, Optional

_OS_PREFIXES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "win32",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "sunos": "sunos",
    "aix": "aix",
}

_ARCH_ALIASES = {
    "x86_64": "x86-64",
    "amd64": "x86-64",
    "x64": "x86-64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv7": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "ppc": "ppc",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loongarch64",
}


def _os_prefix(system: Optional[str] = None) -> str:
    system = (system or platform.system()).lower()
    if system.startswith("win") or system.startswith("cygwin"):
        return "win32"
    return _OS_PREFIXES.get(system, system)


def resource_prefix(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Platform tag used as the resource folder name.

    Examples: ``linux-x86-64``, ``darwin-aarch64``, ``win32-x86-64``.
    """
    machine = (machine or platform.machine()).lower()
    arch = _ARCH_ALIASES.get(machine, machine.replace("_", "-"))
    return f"{_os_prefix(system)}-{arch}"


def library_file_names(library_name: str, system: Optional[str] = None) -> List[str]:
    """Candidate file names for a library on the given platform."""
    os_prefix = _os_prefix(system)
    if os_prefix == "win32":
        return [f"{library_name}.dll", f"lib{library_name}.dll"]
    if os_prefix == "darwin":
        return [f"lib{library_name}.dylib", f"lib{library_name}.so"]
    return [f"lib{library_name}.so"]


def library_path_variable(system: Optional[str] = None) -> str:
    """Environment variable holding the platform's native library search path."""
    os_prefix = _os_prefix(system)
    if os_prefix == "win32":
        return "PATH"
    if os_prefix == "darwin":
        return "DYLD_LIBRARY_PATH"
    return "LD_LIBRARY_PATH"
