"""Tests for ItemService: creation, upload, listing, updates, deletion, duplication."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from stashbox.exceptions import FolderNotFoundError, InvalidInputError, ItemNotFoundError, StorageError
from stashbox.models import File, Item, ItemType
from stashbox.schemas.common import PageParams, SortBy, SortOrder
from stashbox.schemas.folder import FolderCreate
from stashbox.schemas.item import ItemCreate, ItemUpdate
from stashbox.services.folder_service import FolderService
from stashbox.services.item_service import ItemService
from tests.conftest import OTHER_OWNER, OWNER, make_payload


@pytest.fixture()
def service(db, storage):
    return ItemService(db, storage)


def _note(service, name="Note", owner=OWNER, **kwargs):
    return service.create_item(owner, ItemCreate(name=name, type=ItemType.NOTE, **kwargs))


def _upload(service, **kwargs):
    payload = kwargs.pop("payload", None) or make_payload()
    return service.upload_file_item(OWNER, name=kwargs.pop("name", "Upload"),
                                    item_type=kwargs.pop("item_type", ItemType.DOCUMENT),
                                    payload=payload, **kwargs)


class TestCreateItem:

    def test_defaults(self, service):
        item = _note(service, content="draft")
        assert item.tags == []
        assert item.size == 0
        assert item.is_favorite is False
        assert item.is_deleted is False
        assert item.folder_id is None
        assert item.file_id is None

    def test_tags_keep_order_and_duplicates(self, service):
        item = _note(service, tags=["b", "a", "b"])
        assert item.tags == ["b", "a", "b"]

    def test_trashed_folder_rejected(self, db, service):
        folders = FolderService(db)
        folder = folders.create_folder(OWNER, FolderCreate(name="Docs"))
        folders.delete_folder(OWNER, folder.id)
        with pytest.raises(FolderNotFoundError):
            _note(service, folder_id=folder.id)

    def test_foreign_folder_rejected(self, db, service):
        foreign = FolderService(db).create_folder(OTHER_OWNER, FolderCreate(name="Theirs"))
        with pytest.raises(FolderNotFoundError):
            _note(service, folder_id=foreign.id)


class TestUploadFileItem:

    def test_image_upload_is_classified(self, db, service, storage):
        payload = make_payload(b"\x89PNG....", "photo.png", "image/png")
        item = _upload(service, item_type=ItemType.IMAGE, payload=payload)

        assert item.size == len(b"\x89PNG....")
        assert item.file.file_type == "image"
        assert item.file.mime_type == "image/png"
        assert item.file.original_filename == "photo.png"
        assert item.file.filename.endswith(".png")
        assert item.file.external_ref.startswith("images/")
        assert storage.uploads[0]["folder"] == "images"
        assert storage.uploads[0]["resource_kind"] == "image"

    def test_pdf_upload_is_a_raw_document(self, service, storage):
        item = _upload(service, payload=make_payload(b"%PDF-1.4", "report.pdf", "application/pdf"))
        assert item.file.file_type == "document"
        assert storage.uploads[0]["folder"] == "documents"
        assert storage.uploads[0]["resource_kind"] == "raw"

    def test_missing_payload_rejected(self, service, storage):
        with pytest.raises(InvalidInputError) as exc:
            service.upload_file_item(OWNER, name="x", item_type=ItemType.FILE, payload=None)
        assert exc.value.message == "File is required"
        assert storage.uploads == []

    def test_empty_payload_rejected(self, service):
        with pytest.raises(InvalidInputError):
            _upload(service, payload=make_payload(b""))

    def test_folder_checked_before_upload(self, service, storage):
        with pytest.raises(FolderNotFoundError):
            _upload(service, folder_id="missing")
        assert storage.uploads == []

    def test_storage_failure_leaves_no_rows(self, db, service, storage):
        storage.fail_upload = True
        with pytest.raises(StorageError):
            _upload(service)
        db.rollback()
        assert db.query(File).count() == 0
        assert db.query(Item).count() == 0

    def test_metadata_failure_rolls_back_and_propagates(self, db, service, storage, monkeypatch):
        def _boom(entity):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(service.item_repo, "add", _boom)
        with pytest.raises(SQLAlchemyError):
            _upload(service)

        assert db.query(File).count() == 0
        assert db.query(Item).count() == 0
        # The stored object is orphaned, not cleaned up.
        assert len(storage.objects) == 1


class TestListItems:

    def test_pagination_second_page(self, service):
        for n in range(1, 13):
            _note(service, name=f"item-{n:02d}")

        page = service.list_items(
            OWNER, PageParams(page=2, limit=5, sort_by=SortBy.NAME, sort_order=SortOrder.ASC)
        )
        assert [i.name for i in page.items] == [f"item-{n:02d}" for n in range(6, 11)]
        assert page.pagination.total == 12
        assert page.pagination.total_pages == 3

    def test_filters(self, db, service):
        folder = FolderService(db).create_folder(OWNER, FolderCreate(name="Docs"))
        inside = _note(service, name="inside", folder_id=folder.id)
        service.create_item(OWNER, ItemCreate(name="link", type=ItemType.LINK, content="https://x"))
        fav = _note(service, name="fav")
        service.toggle_favorite(OWNER, fav.id)

        by_folder = service.list_items(OWNER, PageParams(), folder_id=folder.id)
        assert [i.id for i in by_folder.items] == [inside.id]

        by_type = service.list_items(OWNER, PageParams(), item_type=ItemType.LINK)
        assert [i.name for i in by_type.items] == ["link"]

        favorites = service.list_items(OWNER, PageParams(), favorites=True)
        assert [i.id for i in favorites.items] == [fav.id]

        not_favorites = service.list_items(OWNER, PageParams(), favorites=False)
        assert fav.id not in {i.id for i in not_favorites.items}
        assert not_favorites.pagination.total == 2

        unfiltered = service.list_items(OWNER, PageParams())
        assert unfiltered.pagination.total == 3

    def test_sort_by_size_desc(self, service):
        small = _upload(service, name="small", payload=make_payload(b"a"))
        big = _upload(service, name="big", payload=make_payload(b"a" * 100))
        page = service.list_items(OWNER, PageParams(sort_by=SortBy.SIZE, sort_order=SortOrder.DESC))
        assert [i.id for i in page.items] == [big.id, small.id]

    def test_excludes_trashed_and_foreign(self, service):
        trashed = _note(service, name="trashed")
        service.delete_item(OWNER, trashed.id)
        _note(service, name="theirs", owner=OTHER_OWNER)
        assert service.list_items(OWNER, PageParams()).pagination.total == 0

    def test_empty_listing(self, service):
        page = service.list_items(OWNER, PageParams())
        assert page.items == []
        assert page.pagination.total_pages == 0


class TestRecentItems:

    def test_most_recently_updated_first(self, service):
        first = _note(service, name="first")
        second = _note(service, name="second")
        service.update_item(OWNER, first.id, ItemUpdate(content="touched"))
        recent = service.recent_items(OWNER, limit=1)
        assert [i.id for i in recent] == [first.id]
        assert len(service.recent_items(OWNER)) == 2
        assert second.id in {i.id for i in service.recent_items(OWNER)}


class TestUpdateItem:

    def test_partial_update(self, service):
        item = _note(service, content="draft", tags=["x"])
        updated = service.update_item(OWNER, item.id, ItemUpdate(name="Final"))
        assert updated.name == "Final"
        assert updated.content == "draft"
        assert updated.tags == ["x"]

    def test_move_to_foreign_folder_fails(self, db, service):
        foreign = FolderService(db).create_folder(OTHER_OWNER, FolderCreate(name="Theirs"))
        item = _note(service)
        with pytest.raises(FolderNotFoundError):
            service.update_item(OWNER, item.id, ItemUpdate(folder_id=foreign.id))

    def test_explicit_null_folder_moves_to_root(self, db, service):
        folder = FolderService(db).create_folder(OWNER, FolderCreate(name="Docs"))
        item = _note(service, folder_id=folder.id)
        updated = service.update_item(OWNER, item.id, ItemUpdate.model_validate({"folder_id": None}))
        assert updated.folder_id is None

    def test_null_name_rejected(self):
        with pytest.raises(ValueError):
            ItemUpdate.model_validate({"name": None})


class TestDeleteAndRestoreRoundTrip:

    def test_soft_delete_then_get_fails(self, service):
        item = _note(service)
        assert service.delete_item(OWNER, item.id) is None
        with pytest.raises(ItemNotFoundError):
            service.get_item(OWNER, item.id)

    def test_soft_delete_keeps_storage_object(self, service, storage):
        item = _upload(service)
        service.delete_item(OWNER, item.id)
        assert storage.removed == []

    def test_permanent_delete_removes_object_and_file(self, db, service, storage):
        item = _upload(service)
        ref = item.file.external_ref

        report = service.delete_item(OWNER, item.id, permanent=True)

        assert report.deleted_items == 1
        assert report.storage_failures == []
        assert storage.removed == [ref]
        assert db.query(Item).count() == 0
        assert db.query(File).count() == 0

    def test_permanent_delete_works_from_trash(self, service):
        item = _note(service)
        service.delete_item(OWNER, item.id)
        assert service.delete_item(OWNER, item.id, permanent=True).deleted_items == 1

    def test_storage_failure_is_reported_not_raised(self, db, service, storage):
        item = _upload(service)
        ref = item.file.external_ref
        storage.fail_remove.add(ref)

        report = service.delete_item(OWNER, item.id, permanent=True)

        assert [(f.item_id, f.external_ref) for f in report.storage_failures] == [(item.id, ref)]
        assert db.query(Item).count() == 0
        assert db.query(File).count() == 0

    def test_shared_file_kept_while_duplicate_lives(self, db, service, storage):
        original = _upload(service)
        copy = service.duplicate_item(OWNER, original.id)

        service.delete_item(OWNER, original.id, permanent=True)
        assert storage.removed == []
        assert db.query(File).count() == 1
        assert service.get_item(OWNER, copy.id).file is not None

        service.delete_item(OWNER, copy.id, permanent=True)
        assert len(storage.removed) == 1
        assert db.query(File).count() == 0

    def test_foreign_item_is_not_found(self, service):
        theirs = _note(service, owner=OTHER_OWNER)
        with pytest.raises(ItemNotFoundError):
            service.delete_item(OWNER, theirs.id, permanent=True)


class TestDuplicateItem:

    def test_duplicate_shares_file(self, db, service):
        original = _upload(service, name="Scan")
        service.update_item(OWNER, original.id, ItemUpdate(tags=["t1", "t2"]))
        files_before = db.query(File).count()

        copy = service.duplicate_item(OWNER, original.id)

        assert copy.id != original.id
        assert copy.name == "Scan (Copy)"
        assert copy.file_id == original.file_id
        assert copy.size == original.size
        assert copy.tags == ["t1", "t2"]
        assert copy.is_favorite is False
        assert db.query(File).count() == files_before

    def test_duplicate_trashed_item_fails(self, service):
        item = _note(service)
        service.delete_item(OWNER, item.id)
        with pytest.raises(ItemNotFoundError):
            service.duplicate_item(OWNER, item.id)


class TestItemFavorite:

    def test_toggle(self, service):
        item = _note(service)
        assert service.toggle_favorite(OWNER, item.id).is_favorite is True
        assert service.toggle_favorite(OWNER, item.id).is_favorite is False
