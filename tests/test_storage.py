"""
Unit tests for the session store, its storage backends, and the session records.
"""
import json
import threading

import pytest

from clinic.encryption import get_encryptor, load_key
from clinic.models import AdminSession, PatientSession, StaffSession, record_type_for
from clinic.storage import BrowserStorage, EncryptedFileStorage, MemoryStorage, SessionResult, SessionStore


def test_set_stores_json_and_remember_marker(storage, sessions):
    record = StaffSession('S1', first_name='Jo', email='jo@clinic.test')

    sessions.set('staff', record, remember=True)

    assert json.loads(storage.get_item('staff')) == {'staffId': 'S1', 'firstName': 'Jo', 'email': 'jo@clinic.test'}
    assert storage.get_item('rememberMeStaff') == 'true'
    assert sessions.remembered('staff')


def test_set_without_remember_removes_stale_marker(storage, sessions):
    storage.set_item('rememberMe', 'true')
    sessions.set('patient', {'patientId': 'P1'})
    assert storage.get_item('rememberMe') is None
    assert not sessions.remembered('patient')


def test_has_is_a_presence_check(storage, sessions):
    assert not sessions.has('admin')
    storage.set_item('admin', 'not even json')
    assert sessions.has('admin')


def test_load_statuses(storage, sessions):
    assert sessions.load('patient').status == SessionResult.MISSING

    storage.set_item('patient', '{broken')
    result = sessions.load('patient')
    assert result.status == SessionResult.MALFORMED
    assert not result.ok

    storage.set_item('patient', json.dumps({'firstName': 'No id'}))
    assert sessions.load('patient').status == SessionResult.MALFORMED

    storage.set_item('patient', json.dumps(['a', 'list']))
    assert sessions.load('patient').status == SessionResult.MALFORMED

    storage.set_item('patient', json.dumps({'patientId': 'P9', 'firstName': 'Rey'}))
    result = sessions.load('patient')
    assert result.ok
    assert result.record.record_id == 'P9'
    assert result.record.full_name == 'Rey'


def test_update_keeps_remember_marker(storage, sessions):
    record = AdminSession('A1', first_name='Old')
    sessions.set('admin', record, remember=True)

    sessions.update('admin', record.updated({'firstName': 'New'}))

    assert sessions.load('admin').record.first_name == 'New'
    assert storage.get_item('rememberMeAdmin') == 'true'


def test_clear_removes_only_that_role(storage, sessions):
    sessions.set('patient', {'patientId': 'P1'}, remember=True)
    sessions.set('staff', {'staffId': 'S1'}, remember=True)

    sessions.clear('patient')

    assert storage.get_item('patient') is None
    assert storage.get_item('rememberMe') is None
    assert sessions.has('staff')
    assert sessions.remembered('staff')


def test_unknown_role_is_rejected(sessions):
    with pytest.raises(KeyError):
        sessions.get('doctor')


def test_record_accepts_generic_id_field():
    record = record_type_for('staff').from_dict({'id': 12, 'firstName': 'Mia', 'role': 'nurse'})
    assert isinstance(record, StaffSession)
    assert record.record_id == 12
    assert record.extra == {'role': 'nurse'}
    assert record.to_dict() == {'staffId': 12, 'firstName': 'Mia', 'role': 'nurse'}


def test_record_full_name_falls_back_to_email():
    assert PatientSession('P1', email='p@clinic.test').full_name == 'p@clinic.test'
    assert PatientSession('P1').full_name == 'P1'


def test_encrypted_storage_round_trips_through_file(tmp_path, encrypted_storage):
    encrypted_storage.set_item('patient', '{"patientId": "P1"}')
    encrypted_storage.set_item('rememberMe', 'true')

    raw = (tmp_path / "session.json").read_text()
    assert 'patientId' not in raw

    reopened = EncryptedFileStorage(str(tmp_path / "session.json"), get_encryptor(str(tmp_path / "secret.key")))
    assert reopened.get_item('patient') == '{"patientId": "P1"}'
    assert sorted(reopened.keys()) == ['patient', 'rememberMe']

    reopened.remove_item('rememberMe')
    again = EncryptedFileStorage(str(tmp_path / "session.json"), get_encryptor(str(tmp_path / "secret.key")))
    assert again.get_item('rememberMe') is None


def test_encrypted_storage_starts_empty_on_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("this is not a fernet token")
    store = EncryptedFileStorage(str(path), get_encryptor(str(tmp_path / "secret.key")))
    assert store.keys() == []


def test_encrypted_storage_starts_empty_with_a_different_key(tmp_path, encrypted_storage):
    encrypted_storage.set_item('admin', '{}')
    other = EncryptedFileStorage(str(tmp_path / "session.json"), get_encryptor(str(tmp_path / "other.key")))
    assert other.get_item('admin') is None


def test_get_encryptor_generates_key_once(tmp_path):
    key_path = str(tmp_path / "secret.key")
    first = get_encryptor(key_path)
    key = load_key(key_path)
    second = get_encryptor(key_path)
    assert load_key(key_path) == key
    assert second.decrypt(first.encrypt(b"hello")) == b"hello"


def test_browser_storage_prefixes_keys_with_browser_id():
    shared = MemoryStorage()
    first = BrowserStorage(shared, 'a' * 32)

    first.set_item('patient', '{"patientId": "P1"}')

    assert shared.keys() == ['a' * 32 + ':patient']
    assert first.get_item('patient') == '{"patientId": "P1"}'
    assert first.keys() == ['patient']


def test_browsers_do_not_see_each_others_sessions():
    shared = MemoryStorage()
    first = SessionStore(BrowserStorage(shared, 'a' * 32))
    second = SessionStore(BrowserStorage(shared, 'b' * 32))

    first.set('patient', PatientSession('P1', first_name='Ana'), remember=True)
    assert not second.has('patient')
    assert not second.remembered('patient')

    second.set('patient', PatientSession('P2', first_name='Ben'))
    first.clear('patient')
    assert second.load('patient').record.first_name == 'Ben'
    assert not first.has('patient')


def test_browser_storage_requires_an_id():
    with pytest.raises(ValueError):
        BrowserStorage(MemoryStorage(), '')


def test_encrypted_storage_serializes_concurrent_writes(tmp_path, encrypted_storage):
    def write(n):
        for i in range(20):
            encrypted_storage.set_item(f'{n}:key{i}', str(i))

    threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    reopened = EncryptedFileStorage(str(tmp_path / "session.json"), get_encryptor(str(tmp_path / "secret.key")))
    assert len(reopened.keys()) == 80
