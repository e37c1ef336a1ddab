"""Tests for the folder converter and engine."""

from __future__ import annotations

import pytest

from vaultform.client.base import ClientError, RemoteNotFound
from vaultform.client.schemas import FolderData, FolderResponse
from vaultform.errors import CreateError, NotFound, TransportError, ValidationError
from vaultform.models import Folder
from vaultform.resources.folder import FolderConverter, FolderEngine


class TestFolderConverter:
    def test_create_request_omits_absent_parent(self):
        request = FolderConverter().to_create_request(Folder(name="project-x", vault_id="v1"))
        assert request.to_wire() == {"name": "project-x", "vaultId": "v1"}

    def test_create_request_with_parent(self):
        request = FolderConverter().to_create_request(
            Folder(name="nested", vault_id="v1", parent_id="f1")
        )
        assert request.to_wire() == {"name": "nested", "vaultId": "v1", "parentId": "f1"}

    def test_update_request_is_name_only(self):
        request = FolderConverter().to_update_request(
            Folder(name="renamed", vault_id="v2", parent_id="f9", id="f1")
        )
        assert request.to_wire() == {"name": "renamed"}

    def test_empty_parent_becomes_none(self):
        folder = FolderConverter().from_response(
            FolderResponse(
                status="success",
                data=FolderData(id="f1", name="top", vault_id="v1", parent_id=""),
            )
        )
        assert folder.parent_id is None
        assert folder == Folder(id="f1", name="top", vault_id="v1")

    def test_missing_parent_becomes_none(self):
        folder = FolderConverter().from_data(FolderData(id="f1", name="top", vault_id="v1"))
        assert folder.parent_id is None


class TestFolderLifecycle:
    def test_create_top_level_folder(self, service):
        live = FolderEngine(service).create(Folder(name="project-x", vault_id="v1"))

        sent = service.calls_to("add_folder")[0]
        assert "parentId" not in sent
        assert service.folders[live.id].parent_id == ""
        assert live.parent_id is None
        assert live.id == "folder-1"
        assert live.name == "project-x"
        assert live.vault_id == "v1"

    def test_create_nested_folder(self, service):
        engine = FolderEngine(service)
        parent = engine.create(Folder(name="parent", vault_id="v1"))
        child = engine.create(Folder(name="child", vault_id="v1", parent_id=parent.id))
        assert child.parent_id == parent.id
        assert child.vault_id == parent.vault_id

    def test_create_uses_add_response_without_extra_read(self, service):
        FolderEngine(service).create(Folder(name="project-x", vault_id="v1"))
        assert service.calls_to("get_folder") == []

    def test_read_is_idempotent(self, service):
        engine = FolderEngine(service)
        created = engine.create(Folder(name="project-x", vault_id="v1"))
        assert engine.read(created.id) == engine.read(created.id) == created

    def test_read_unknown_id_is_not_found(self, service):
        with pytest.raises(NotFound) as exc_info:
            FolderEngine(service).read("folder-404")
        assert exc_info.value.kind == "folder"
        assert exc_info.value.resource_id == "folder-404"

    def test_read_http_404_is_not_found(self, service):
        service.fail("get_folder", RemoteNotFound("GET /folders/x: not found", status_code=404))
        with pytest.raises(NotFound):
            FolderEngine(service).read("x")

    def test_read_transport_failure(self, service):
        service.fail("get_folder", ClientError("connection reset"))
        with pytest.raises(TransportError, match="connection reset") as exc_info:
            FolderEngine(service).read("folder-1")
        assert exc_info.value.operation == "read"
        assert exc_info.value.resource_id == "folder-1"

    def test_update_renames_only(self, service):
        engine = FolderEngine(service)
        created = engine.create(Folder(name="project-x", vault_id="v1"))
        live = engine.update(created.id, Folder(name="project-y", vault_id="v1", id=created.id))
        assert live.name == "project-y"
        assert live.id == created.id
        assert service.calls_to("edit_folder") == [{"name": "project-y"}]

    def test_update_rejects_vault_change(self, service):
        engine = FolderEngine(service)
        created = engine.create(Folder(name="project-x", vault_id="v1"))
        with pytest.raises(ValidationError, match="vault_id cannot change"):
            engine.update(
                created.id,
                Folder(name="project-x", vault_id="v2", id=created.id),
                current=created,
            )
        assert service.calls_to("edit_folder") == []

    def test_create_failure_wraps_transport_error(self, service):
        service.fail("add_folder", ClientError("HTTP 500"))
        with pytest.raises(CreateError) as exc_info:
            FolderEngine(service).create(Folder(name="project-x", vault_id="v1"))
        assert isinstance(exc_info.value.__cause__, TransportError)
        assert isinstance(exc_info.value.__cause__.__cause__, ClientError)
        assert len(service.calls_to("add_folder")) == 1

    def test_delete_then_read_is_not_found(self, service):
        engine = FolderEngine(service)
        created = engine.create(Folder(name="project-x", vault_id="v1"))
        engine.delete(created.id)
        with pytest.raises(NotFound):
            engine.read(created.id)

    def test_import_matches_read(self, service):
        engine = FolderEngine(service)
        created = engine.create(Folder(name="project-x", vault_id="v1"))
        assert engine.import_(created.id) == engine.read(created.id)
