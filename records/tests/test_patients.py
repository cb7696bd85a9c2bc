import pytest

from records.exceptions import ConflictError, DuplicatePatient, NotFoundError, ValidationError
from records.models import Gender, Patient
from records.services.patients import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, PatientData, PatientDirectory, clamp_page
from records.stores import PatientQuery, PatientStore

pytestmark = pytest.mark.django_db


@pytest.fixture
def directory():
    return PatientDirectory(PatientStore())


def _data(name='Jane Roe', age=42, gender=Gender.FEMALE, contact_info='555-0100', medical_notes=''):
    return PatientData(name=name, age=age, gender=gender, contact_info=contact_info, medical_notes=medical_notes)


def test_create_patient(directory, receptionist):
    patient = directory.create(_data(medical_notes='allergic to penicillin'), receptionist.pk)
    stored = Patient.objects.get(pk=patient.pk)
    assert stored.name == 'Jane Roe'
    assert stored.age == 42
    assert stored.medical_notes == 'allergic to penicillin'
    assert stored.created_by == receptionist


@pytest.mark.parametrize('overrides,message', [
    ({'name': ''}, 'patient name is required'),
    ({'age': None}, 'invalid patient age'),
    ({'age': -1}, 'invalid patient age'),
    ({'age': 151}, 'invalid patient age'),
    ({'gender': ''}, 'patient gender is required'),
    ({'gender': 'unknown'}, 'invalid patient gender'),
    ({'contact_info': ''}, 'patient contact information is required'),
])
def test_create_validation(directory, receptionist, overrides, message):
    with pytest.raises(ValidationError) as excinfo:
        directory.create(_data(**overrides), receptionist.pk)
    assert str(excinfo.value.detail) == message
    assert not Patient.objects.exists()


@pytest.mark.parametrize('age', [0, 150])
def test_age_bounds_are_inclusive(directory, receptionist, age):
    assert directory.create(_data(age=age), receptionist.pk).age == age


def test_create_requires_creator(directory):
    with pytest.raises(ValidationError):
        directory.create(_data(), None)


def test_duplicate_name_or_contact_is_rejected(directory, receptionist):
    directory.create(_data(name='A', contact_info='1'), receptionist.pk)
    with pytest.raises(DuplicatePatient):
        directory.create(_data(name='A', contact_info='2'), receptionist.pk)
    with pytest.raises(DuplicatePatient):
        directory.create(_data(name='B', contact_info='1'), receptionist.pk)
    assert Patient.objects.count() == 1


def test_duplicate_is_a_conflict(directory, receptionist):
    directory.create(_data(name='A', contact_info='1'), receptionist.pk)
    with pytest.raises(ConflictError) as excinfo:
        directory.create(_data(name='A', contact_info='2'), receptionist.pk)
    assert excinfo.value.status_code == 409


def test_unique_constraints_back_up_duplicate_check(make_patient, receptionist):
    make_patient('A', '1')
    with pytest.raises(DuplicatePatient):
        PatientStore().create(name='A', age=1, gender=Gender.MALE, contact_info='2', created_by=receptionist)
    with pytest.raises(DuplicatePatient):
        PatientStore().create(name='B', age=1, gender=Gender.MALE, contact_info='1', created_by=receptionist)


def test_exists_by_name_or_contact(directory, make_patient):
    make_patient('A', '1')
    assert directory.exists_by_name_or_contact('A', 'other')
    assert directory.exists_by_name_or_contact('other', '1')
    assert not directory.exists_by_name_or_contact('other', 'other')


def test_get_by_id(directory, make_patient):
    patient = make_patient('A', '1')
    assert directory.get_by_id(patient.pk) == patient
    with pytest.raises(NotFoundError):
        directory.get_by_id(patient.pk + 100)


@pytest.mark.parametrize('patient_id', [0, -3])
def test_non_positive_ids_are_invalid(directory, patient_id):
    with pytest.raises(ValidationError):
        directory.get_by_id(patient_id)
    with pytest.raises(ValidationError):
        directory.delete(patient_id)


def test_update_overwrites_demographics(directory, make_patient):
    patient = make_patient('A', '1', medical_notes='keep me')
    directory.update(patient.pk, _data(name='A2', age=50, gender=Gender.OTHER, contact_info='9'))
    stored = Patient.objects.get(pk=patient.pk)
    assert (stored.name, stored.age, stored.gender, stored.contact_info) == ('A2', 50, Gender.OTHER, '9')
    assert stored.medical_notes == 'keep me'


def test_update_may_keep_its_own_name_and_contact(directory, make_patient):
    patient = make_patient('A', '1')
    directory.update(patient.pk, _data(name='A', contact_info='1', age=31))
    assert Patient.objects.get(pk=patient.pk).age == 31


def test_update_collision_with_other_patient(directory, make_patient):
    make_patient('A', '1')
    other = make_patient('B', '2')
    with pytest.raises(DuplicatePatient):
        directory.update(other.pk, _data(name='A', contact_info='3'))
    assert Patient.objects.get(pk=other.pk).name == 'B'


def test_update_missing_patient(directory):
    with pytest.raises(NotFoundError):
        directory.update(999, _data())


def test_update_medical_notes_touches_only_notes(directory, make_patient):
    patient = make_patient('A', '1', age=33)
    updated = directory.update_medical_notes(patient.pk, 'follow-up in two weeks')
    assert updated.medical_notes == 'follow-up in two weeks'
    assert (updated.name, updated.age, updated.contact_info) == ('A', 33, '1')
    assert updated.updated_at >= patient.updated_at


def test_update_medical_notes_missing_patient(directory):
    with pytest.raises(NotFoundError):
        directory.update_medical_notes(999, 'notes')


def test_delete(directory, make_patient):
    patient = make_patient('A', '1')
    directory.delete(patient.pk)
    with pytest.raises(NotFoundError):
        directory.get_by_id(patient.pk)
    with pytest.raises(NotFoundError):
        directory.delete(patient.pk)


def test_search_filters(directory, make_patient):
    young = make_patient('Tom Young', '555-1', age=5, gender=Gender.MALE)
    mid = make_patient('Ann Middle', '555-2', age=10, gender=Gender.FEMALE)
    make_patient('Old Tom', '777-3', age=80, gender=Gender.MALE)

    assert directory.search(PatientQuery(age_min=5, age_max=10)) == [young, mid]
    assert [p.name for p in directory.search(PatientQuery(name='tom'))] == ['Tom Young', 'Old Tom']
    assert directory.search(PatientQuery(name='tom', gender=Gender.MALE, age_max=10)) == [young]
    assert directory.search(PatientQuery(contact_info='555')) == [young, mid]
    assert len(directory.search(PatientQuery())) == 3


@pytest.mark.parametrize('query', [
    PatientQuery(age_min=-1),
    PatientQuery(age_max=151),
    PatientQuery(age_min=20, age_max=10),
])
def test_search_rejects_bad_age_ranges(directory, query):
    with pytest.raises(ValidationError):
        directory.search(query)


def test_search_min_age_without_max(directory, make_patient):
    make_patient('A', '1', age=5)
    old = make_patient('B', '2', age=90)
    assert directory.search(PatientQuery(age_min=60)) == [old]


@pytest.mark.parametrize('page,limit,expected', [
    (None, None, (1, DEFAULT_PAGE_LIMIT)),
    (0, 0, (1, DEFAULT_PAGE_LIMIT)),
    (-2, -5, (1, DEFAULT_PAGE_LIMIT)),
    (3, 25, (3, 25)),
    (1, 1000, (1, MAX_PAGE_LIMIT)),
])
def test_clamp_page(page, limit, expected):
    assert clamp_page(page, limit) == expected


def test_list_pages(directory, make_patient):
    created = [make_patient(f'P{i}', str(i)) for i in range(12)]

    first = directory.list(0, 0)
    assert (first.page, first.limit, first.total) == (1, 10, 12)
    assert first.items == created[:10]
    assert directory.list(1, 10).items == first.items

    second = directory.list(2, 10)
    assert second.items == created[10:]
    assert directory.list(5, 10).items == []


def test_list_far_past_the_end_is_empty(directory, make_patient):
    make_patient('A', '1')
    page = directory.list(10 ** 19, 10)
    assert page.items == []
    assert page.total == 1
