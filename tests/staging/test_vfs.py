"""Tests for virtual filesystem mounts and extraction."""

import os
import zipfile

import pytest

from native_stage.staging import (
    UnknownMountError,
    VirtualFSCopyError,
    VirtualFileSystem,
    VirtualNode,
    extract_virtual,
)


@pytest.fixture
def tree(tmp_path):
    """Source tree: X/{a.so, inner/b.so} and Y/{c.so}."""
    source = tmp_path / "src"
    (source / "X" / "inner").mkdir(parents=True)
    (source / "X" / "a.so").write_bytes(b"a" * 10)
    (source / "X" / "inner" / "b.so").write_bytes(b"b" * 20)
    (source / "Y").mkdir()
    (source / "Y" / "c.so").write_bytes(b"c" * 30)
    return source


class TestVirtualNode:
    """Test the node wrapper over traversables."""

    def test_path_node(self, tree):
        """Test name, kind, size and children of a filesystem-backed node."""
        node = VirtualNode(tree / "X")

        assert node.name == "X"
        assert node.is_directory
        assert [child.name for child in node.children()] == ["a.so", "inner"]
        assert VirtualNode(tree / "X" / "inner" / "b.so").size == 20

    def test_zip_node(self, native_zip):
        """Test size and children of a zip-backed node."""
        root = VirtualNode(zipfile.Path(native_zip, "linux-x86-64/"))

        assert root.name == "linux-x86-64"
        assert root.is_directory
        assert [child.name for child in root.children()] == ["libfoo.so", "sub"]
        assert VirtualNode(zipfile.Path(native_zip, "linux-x86-64/libfoo.so")).size == 2048

    def test_directory_size_is_zero(self, tree):
        assert VirtualNode(tree / "X").size == 0


class TestVirtualFileSystem:
    """Test mount registry and URL lookup."""

    def test_mount_returns_url(self, vfs, tree):
        """Test that mounting yields a vfs URL for the mount point."""
        assert vfs.mount("webapp", tree) == "vfs:/webapp/"

    def test_get_child(self, vfs, tree):
        """Test resolving a URL to a node."""
        vfs.mount("webapp", tree)

        node = vfs.get_child("vfs:/webapp/X/inner")

        assert node.name == "inner"
        assert node.is_directory

    def test_get_child_unknown_mount(self, vfs):
        """Test that an unknown mount raises."""
        with pytest.raises(UnknownMountError) as exc_info:
            vfs.get_child("vfs:/missing/X")
        assert exc_info.value.context == {"url": "vfs:/missing/X"}

    def test_get_child_rejects_other_schemes(self, vfs):
        with pytest.raises(VirtualFSCopyError):
            vfs.get_child("file:///tmp/X")

    def test_find(self, vfs, tree, tmp_path):
        """Test that only mounts containing the name are reported."""
        other = tmp_path / "other"
        other.mkdir()
        vfs.mount("webapp", tree)
        vfs.mount("other", other)

        assert list(vfs.find("X")) == ["vfs:/webapp/X"]
        assert list(vfs.find("nothing")) == []

    def test_unmount(self, vfs, tree):
        vfs.mount("webapp", tree)
        vfs.unmount("webapp")

        assert vfs.mounts() == {}

    def test_invalid_mount_name(self, vfs, tree):
        with pytest.raises(ValueError):
            vfs.mount("a/b", tree)

    def test_mount_zip(self, native_zip):
        """Test a zip bundle mounted as a virtual filesystem."""
        vfs = VirtualFileSystem()
        vfs.mount("bundle", zipfile.Path(native_zip))

        assert list(vfs.find("linux-x86-64")) == ["vfs:/bundle/linux-x86-64"]
        node = vfs.get_child("vfs:/bundle/linux-x86-64/sub/libbar.so")
        assert node.size == 512


class TestExtractVirtual:
    """Test recursive extraction of virtual subtrees."""

    def test_matching_name_copies_children_directly(self, tree, tmp_path):
        """Test that a root named like the destination is not nested again."""
        destination = tmp_path / "stage" / "X"

        copied = extract_virtual(VirtualNode(tree / "X"), destination)

        assert copied == 2
        assert (destination / "a.so").stat().st_size == 10
        assert (destination / "inner" / "b.so").stat().st_size == 20
        assert not (destination / "X").exists()

    def test_other_name_creates_subfolder(self, tree, tmp_path):
        """Test that a root with a different name gets its own folder."""
        destination = tmp_path / "stage" / "X"

        extract_virtual(VirtualNode(tree / "Y"), destination)

        assert (destination / "Y" / "c.so").stat().st_size == 30
        assert not (destination / "c.so").exists()

    def test_name_match_is_case_insensitive(self, tree, tmp_path):
        destination = tmp_path / "stage" / "x"

        extract_virtual(VirtualNode(tree / "X"), destination)

        assert (destination / "a.so").exists()
        assert not (destination / "X").exists()

    def test_nested_folder_named_like_parent_is_flattened(self, tmp_path):
        """Test that the name check applies at every level, not only the root."""
        source = tmp_path / "src" / "lib" / "lib"
        source.mkdir(parents=True)
        (source / "deep.so").write_bytes(b"d")
        destination = tmp_path / "stage" / "lib"

        extract_virtual(VirtualNode(tmp_path / "src" / "lib"), destination)

        assert (destination / "deep.so").exists()
        assert not (destination / "lib").exists()

    def test_single_file_node(self, tree, tmp_path):
        destination = tmp_path / "stage"

        copied = extract_virtual(VirtualNode(tree / "Y" / "c.so"), destination)

        assert copied == 1
        assert (destination / "c.so").read_bytes() == b"c" * 30

    def test_skips_file_with_matching_size(self, tree, tmp_path):
        """Test that an existing file of the same size is left untouched."""
        destination = tmp_path / "stage" / "X"
        destination.mkdir(parents=True)
        (destination / "a.so").write_bytes(b"z" * 10)

        copied = extract_virtual(VirtualNode(tree / "X"), destination)

        assert copied == 1
        assert (destination / "a.so").read_bytes() == b"z" * 10

    def test_second_run_writes_nothing(self, tree, tmp_path):
        destination = tmp_path / "stage" / "X"
        extract_virtual(VirtualNode(tree / "X"), destination)
        staged = destination / "inner" / "b.so"
        os.utime(staged, (1_000_000, 1_000_000))

        copied = extract_virtual(VirtualNode(tree / "X"), destination)

        assert copied == 0
        assert staged.stat().st_mtime == 1_000_000

    def test_dotted_directory_is_treated_as_file(self, tmp_path):
        """Test that a folder with a dot in its name is copied as a file and fails."""
        source = tmp_path / "src" / "lib.d"
        source.mkdir(parents=True)
        (source / "x.so").write_bytes(b"x")

        with pytest.raises(VirtualFSCopyError) as exc_info:
            extract_virtual(VirtualNode(source), tmp_path / "stage")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.context["node"] == "lib.d"

    def test_write_failure_propagates(self, tree, tmp_path):
        """Test that a destination that cannot hold files raises."""
        blocker = tmp_path / "stage"
        blocker.write_bytes(b"not a directory")

        with pytest.raises(VirtualFSCopyError):
            extract_virtual(VirtualNode(tree / "Y" / "c.so"), blocker)

    def test_zip_backed_extraction(self, native_zip, tmp_path):
        """Test mirroring a zip-backed subtree."""
        destination = tmp_path / "stage" / "linux-x86-64"

        extract_virtual(VirtualNode(zipfile.Path(native_zip, "linux-x86-64/")), destination)

        assert (destination / "libfoo.so").stat().st_size == 2048
        assert (destination / "sub" / "libbar.so").stat().st_size == 512
