"""Shared fixtures for staging tests."""

import zipfile
from pathlib import Path

import pytest

from native_stage.staging import PathResolver, StagingCoordinator, VirtualFileSystem

RESOURCE_NAME = "linux-x86-64"
LIBFOO_SIZE = 2048
LIBBAR_SIZE = 512


def payload(size: int, fill: bytes = b"\x7f") -> bytes:
    return fill * size


@pytest.fixture
def native_zip(tmp_path) -> Path:
    """Archive with linux-x86-64/libfoo.so (2048 B) and linux-x86-64/sub/libbar.so (512 B)."""
    zip_path = tmp_path / "deps" / "natives.zip"
    zip_path.parent.mkdir(parents=True)
    with zipfile.ZipFile(zip_path, 'w') as zf:
        zf.writestr(f"{RESOURCE_NAME}/", "")
        zf.writestr(f"{RESOURCE_NAME}/libfoo.so", payload(LIBFOO_SIZE))
        zf.writestr(f"{RESOURCE_NAME}/sub/", "")
        zf.writestr(f"{RESOURCE_NAME}/sub/libbar.so", payload(LIBBAR_SIZE, b"\x01"))
        zf.writestr("darwin-aarch64/libfoo.dylib", payload(64))
        zf.writestr("README.txt", "not a native resource")
    return zip_path


@pytest.fixture
def native_dir(tmp_path) -> Path:
    """Plain search path directory holding linux-x86-64/libplain.so."""
    root = tmp_path / "classes"
    lib_dir = root / RESOURCE_NAME
    lib_dir.mkdir(parents=True)
    (lib_dir / "libplain.so").write_bytes(payload(100))
    return root


@pytest.fixture
def webapp_dir(tmp_path) -> Path:
    """Folder served through a virtual filesystem mount."""
    root = tmp_path / "webapp"
    (root / RESOURCE_NAME / "sub").mkdir(parents=True)
    (root / RESOURCE_NAME / "libfoo.so").write_bytes(payload(LIBFOO_SIZE))
    (root / RESOURCE_NAME / "sub" / "libbar.so").write_bytes(payload(LIBBAR_SIZE))
    return root


@pytest.fixture
def vfs() -> VirtualFileSystem:
    return VirtualFileSystem()


@pytest.fixture
def staging_root(tmp_path) -> Path:
    return tmp_path / "tmp" / "native-libs"


@pytest.fixture
def make_coordinator(staging_root, vfs):
    """Factory for coordinators that only search the given entries."""
    def factory(search_path) -> StagingCoordinator:
        resolver = PathResolver(search_path=search_path, vfs=vfs, include_sys_path=False)
        return StagingCoordinator(staging_root, resolver)
    return factory
