"""Tests for the file-backed vault backend."""

import json
import os
import stat
import sys

import pytest
import pytest_asyncio

from localvault import DecryptionError, FileCorruptedError, LocalVaultBackend, VaultBackendError
from localvault.crypto import decrypt, encrypt, generate_salt, get_fernet
from vaultsession import CategoryDraft, CredentialDraft, GeneratorSettings
from vaultsession.config import DEFAULT_CATEGORIES


MASTER = "correct horse battery staple"


@pytest.fixture
def vault_path(tmp_path):
    return str(tmp_path / "vault" / "password_vault.json")


@pytest.fixture
def local(vault_path):
    # Low iteration count keeps the suite fast
    return LocalVaultBackend(vault_path, iterations=1000)


@pytest_asyncio.fixture
async def initialized(local):
    await local.initialize_vault(MASTER)
    return local


def read_file(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class TestInitialize:
    """Vault creation."""

    @pytest.mark.asyncio
    async def test_creates_vault_with_default_categories(self, local, vault_path):
        assert local.exists() is False
        assert await local.initialize_vault(MASTER) is True
        assert local.exists() is True

        categories = await local.get_categories()
        assert [(c.name, c.icon) for c in categories] == DEFAULT_CATEGORIES
        assert len({c.id for c in categories}) == len(categories)

    @pytest.mark.asyncio
    async def test_master_password_not_stored(self, initialized, vault_path):
        with open(vault_path, encoding="utf-8") as f:
            assert MASTER not in f.read()

    @pytest.mark.asyncio
    async def test_existing_vault_is_not_overwritten(self, initialized, vault_path):
        before = read_file(vault_path)
        with pytest.raises(VaultBackendError):
            await initialized.initialize_vault("other")
        assert read_file(vault_path) == before

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="Unix permissions only")
    async def test_vault_file_is_owner_only(self, initialized, vault_path):
        mode = stat.S_IMODE(os.stat(vault_path).st_mode)
        assert mode == 0o600


class TestVerify:

    @pytest.mark.asyncio
    async def test_correct_and_wrong_password(self, initialized):
        assert await initialized.verify_master_password(MASTER) is True
        assert await initialized.verify_master_password("wrong") is False

    @pytest.mark.asyncio
    async def test_missing_vault(self, local):
        with pytest.raises(VaultBackendError):
            await local.verify_master_password(MASTER)

    @pytest.mark.asyncio
    async def test_corrupted_vault(self, local, vault_path):
        os.makedirs(os.path.dirname(vault_path))
        with open(vault_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with pytest.raises(FileCorruptedError):
            await local.verify_master_password(MASTER)

    @pytest.mark.asyncio
    async def test_document_missing_keys(self, local, vault_path):
        os.makedirs(os.path.dirname(vault_path))
        with open(vault_path, "w", encoding="utf-8") as f:
            json.dump({"passwords": []}, f)
        with pytest.raises(FileCorruptedError, match="master_hash"):
            await local.verify_master_password(MASTER)


class TestPasswords:
    """Credential storage."""

    @pytest.mark.asyncio
    async def test_add_assigns_id_and_timestamps(self, initialized):
        created = await initialized.add_password(
            CredentialDraft(title="Bank", username="alice", password="s3cret"), MASTER
        )
        assert created.id
        assert created.created_at > 0
        assert created.created_at == created.updated_at

        stored = await initialized.get_passwords(MASTER)
        assert stored == [created]

    @pytest.mark.asyncio
    async def test_passwords_encrypted_at_rest(self, initialized, vault_path):
        await initialized.add_password(
            CredentialDraft(title="Bank", password="plaintext-secret"), MASTER
        )
        data = read_file(vault_path)
        assert "plaintext-secret" not in json.dumps(data)
        assert data["passwords"][0]["title"] == "Bank"

    @pytest.mark.asyncio
    async def test_wrong_master_password_rejected(self, initialized):
        with pytest.raises(VaultBackendError, match="Incorrect master password"):
            await initialized.add_password(CredentialDraft(title="Bank"), "wrong")
        with pytest.raises(VaultBackendError):
            await initialized.get_passwords("wrong")
        assert await initialized.get_passwords(MASTER) == []

    @pytest.mark.asyncio
    async def test_update_keeps_created_at(self, initialized, monkeypatch):
        monkeypatch.setattr("localvault.backend._now", lambda: 1000)
        created = await initialized.add_password(CredentialDraft(title="Bank"), MASTER)

        monkeypatch.setattr("localvault.backend._now", lambda: 2000)
        changed = created.model_copy(update={"title": "Bank 2", "created_at": 5})
        updated = await initialized.update_password(changed, MASTER)

        assert updated.created_at == 1000
        assert updated.updated_at == 2000
        assert updated.title == "Bank 2"
        assert await initialized.get_passwords(MASTER) == [updated]

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, initialized):
        created = await initialized.add_password(CredentialDraft(title="Bank"), MASTER)
        with pytest.raises(VaultBackendError):
            await initialized.update_password(created.model_copy(update={"id": "nope"}), MASTER)

    @pytest.mark.asyncio
    async def test_delete(self, initialized):
        created = await initialized.add_password(CredentialDraft(title="Bank"), MASTER)
        assert await initialized.delete_password(created.id) is True
        assert await initialized.get_passwords(MASTER) == []

        with pytest.raises(VaultBackendError):
            await initialized.delete_password(created.id)


class TestCategories:

    @pytest.mark.asyncio
    async def test_add_update_delete(self, initialized):
        created = await initialized.add_category(CategoryDraft(name="Games", icon="g"))
        renamed = await initialized.update_category(created.model_copy(update={"name": "Gaming"}))
        assert renamed.name == "Gaming"
        assert "Gaming" in [c.name for c in await initialized.get_categories()]

        assert await initialized.delete_category(created.id) is True
        assert created.id not in [c.id for c in await initialized.get_categories()]

    @pytest.mark.asyncio
    async def test_unknown_category(self, initialized):
        created = await initialized.add_category(CategoryDraft(name="Games"))
        await initialized.delete_category(created.id)
        with pytest.raises(VaultBackendError):
            await initialized.update_category(created)
        with pytest.raises(VaultBackendError):
            await initialized.delete_category(created.id)


class TestGenerate:

    @pytest.mark.asyncio
    async def test_generate_respects_length(self, local):
        password = await local.generate_password(GeneratorSettings(length=40))
        assert len(password) == 40

    @pytest.mark.asyncio
    async def test_generate_without_character_types(self, local):
        settings = GeneratorSettings(
            include_uppercase=False,
            include_lowercase=False,
            include_numbers=False,
            include_symbols=False,
        )
        with pytest.raises(ValueError):
            await local.generate_password(settings)


class TestCrypto:

    def test_round_trip_and_wrong_key(self):
        salt = generate_salt()
        token = encrypt(get_fernet(MASTER, salt, 1000), "secret")
        assert decrypt(get_fernet(MASTER, salt, 1000), token) == "secret"
        with pytest.raises(DecryptionError):
            decrypt(get_fernet("other", salt, 1000), token)
