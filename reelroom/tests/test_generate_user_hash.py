from reelroom.core.security import verify_password
from reelroom.scripts import generate_user_hash


def _printed_hash(out: str) -> str:
    line = next(line for line in out.splitlines() if line.startswith("Hash: "))
    return line.removeprefix("Hash: ")


def test_defaults_to_demo_salt(capsys):
    assert generate_user_hash.main(["hunter2"]) == 0

    out = capsys.readouterr().out
    credential = _printed_hash(out)
    assert credential.startswith("demo-salt:")
    assert verify_password("hunter2", credential)
    assert "(SELECT id FROM roles WHERE name = 'user')" in out


def test_custom_salt_and_role(capsys):
    assert generate_user_hash.main(["hunter2", "pepper", "--role", "admin"]) == 0

    out = capsys.readouterr().out
    assert _printed_hash(out).startswith("pepper:")
    assert "name = 'admin'" in out


def test_invalid_salt_fails(capsys):
    assert generate_user_hash.main(["hunter2", "a:b"]) == 1
    assert "salt" in capsys.readouterr().err.lower()
