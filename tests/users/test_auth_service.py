import pytest
from werkzeug.security import generate_password_hash

from academy_attendance.core.enums import Role
from academy_attendance.core.exceptions import AuthenticationError, ValidationError
from academy_attendance.users.model import TeacherProfile, User
from academy_attendance.users.service import AuthService


def _user(user_id=1, username="ana", password="pw", role=Role.TEACHER, **kw):
    return User(user_id=user_id, username=username, password_hash=generate_password_hash(password), role=role, **kw)


def test_teacher_login_resolves_teacher_profile(users_of):
    repo = users_of([_user()], [TeacherProfile(teacher_id=10, user_id=1, first_names="Ana", last_names="Pérez")])

    s_user = AuthService(repo).authenticate("ana", "pw")

    assert s_user.role == Role.TEACHER
    assert s_user.teacher_id == 10
    assert s_user.full_name == "Ana Pérez"


def test_admin_login_has_no_teacher_scope(users_of):
    repo = users_of([_user(username="root", role=Role.ADMIN)])
    s_user = AuthService(repo).authenticate("root", "pw")

    assert s_user.teacher_id is None
    assert s_user.full_name == "root"


def test_wrong_password_raises(users_of):
    with pytest.raises(AuthenticationError):
        AuthService(users_of([_user()])).authenticate("ana", "wrong")


def test_unknown_or_inactive_user_raises(users_of):
    repo = users_of([_user(username="old", is_active=False)])
    with pytest.raises(AuthenticationError):
        AuthService(repo).authenticate("nobody", "pw")
    with pytest.raises(AuthenticationError):
        AuthService(repo).authenticate("old", "pw")


def test_placeholder_hash_never_matches(users_of):
    user = User(user_id=1, username="seed", password_hash="CHANGE_ME", role=Role.ADMIN)
    with pytest.raises(AuthenticationError):
        AuthService(users_of([user])).authenticate("seed", "CHANGE_ME")


def test_empty_username_is_invalid(users_of):
    with pytest.raises(ValidationError):
        AuthService(users_of([])).authenticate("  ", "pw")
