"""Unit tests for the file system blob store."""

import pytest

from tagstore.errors import BlobStoreError, InvalidArgument
from tagstore.kernel.blobs.blob_store import FileSystemBlobStore, image_extension, image_file_name


class TestFileSystemBlobStore:
    """Tests for FileSystemBlobStore."""
    
    @pytest.mark.asyncio
    async def test_put_creates_root_and_file(self, tmp_path):
        store = FileSystemBlobStore(tmp_path / "images" / "example")
        
        reference = await store.put("img_1_5.png", b"\x89PNG")
        
        assert reference == "img_1_5.png"
        assert (tmp_path / "images" / "example" / "img_1_5.png").read_bytes() == b"\x89PNG"
    
    @pytest.mark.asyncio
    async def test_delete_removes_file(self, tmp_path):
        store = FileSystemBlobStore(tmp_path)
        await store.put("a.png", b"x")
        
        await store.delete("a.png")
        
        assert not (tmp_path / "a.png").exists()
    
    @pytest.mark.asyncio
    async def test_delete_missing_is_not_an_error(self, tmp_path):
        await FileSystemBlobStore(tmp_path).delete("never-written.png")
    
    @pytest.mark.asyncio
    async def test_reference_cannot_escape_root(self, tmp_path):
        store = FileSystemBlobStore(tmp_path / "root")
        
        with pytest.raises(InvalidArgument):
            await store.put("../outside.png", b"x")
    
    @pytest.mark.asyncio
    async def test_write_failure_is_blob_store_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        store = FileSystemBlobStore(blocker)
        
        with pytest.raises(BlobStoreError):
            await store.put("a.png", b"x")


class TestImageNames:
    """Tests for image blob naming."""
    
    def test_extension_from_content_type(self):
        assert image_extension("image/png") == ".png"
        assert image_extension("image/png; charset=binary") == ".png"
    
    def test_unknown_content_type(self):
        with pytest.raises(InvalidArgument):
            image_extension("application/x-not-a-real-type")
    
    def test_file_name_embeds_record_id_and_time(self):
        assert image_file_name(42, ".png", 1700000000000) == "img_42_1700000000000.png"
