"""
Tests for shell profile writes — append-once semantics.
"""

from pathlib import Path

from devbootstrap.core.services.profile import (
    MARKER,
    ShellProfile,
    export_line,
    path_line,
)


class TestLines:
    def test_export_line(self):
        assert export_line("ANDROID_HOME", "$ANDROID_SDK_ROOT") == (
            'export ANDROID_HOME="$ANDROID_SDK_ROOT"'
        )

    def test_path_line(self):
        assert path_line("$A/bin", "$B") == 'export PATH="$A/bin:$B:$PATH"'


class TestShellProfile:
    def test_creates_file_and_parents(self, tmp_path: Path):
        profile = ShellProfile(tmp_path / "nested" / ".bashrc")
        assert profile.append_once('export FOO="1"')
        content = profile.path.read_text()
        assert MARKER in content
        assert 'export FOO="1"' in content

    def test_append_once_is_idempotent(self, tmp_path: Path):
        profile = ShellProfile(tmp_path / ".bashrc")
        line = 'export PATH="$HOME/.dotnet/tools:$PATH"'
        assert profile.append_once(line)
        assert not profile.append_once(line)
        assert profile.path.read_text().count(line) == 1

    def test_ensure_lines_returns_only_new(self, tmp_path: Path):
        rc = tmp_path / ".bashrc"
        rc.write_text('alias ll="ls -l"\nexport A="1"\n')
        profile = ShellProfile(rc)
        written = profile.ensure_lines(['export A="1"', 'export B="2"', 'export B="2"'])
        assert written == ['export B="2"']
        content = rc.read_text()
        assert content.startswith('alias ll="ls -l"\n')
        assert content.count('export B="2"') == 1

    def test_second_pass_writes_nothing(self, tmp_path: Path):
        profile = ShellProfile(tmp_path / ".bashrc")
        lines = ['export X="1"', 'export Y="2"']
        profile.ensure_lines(lines)
        before = profile.path.read_text()
        assert profile.ensure_lines(lines) == []
        assert profile.path.read_text() == before
        assert before.count(MARKER) == 1

    def test_missing_trailing_newline(self, tmp_path: Path):
        rc = tmp_path / ".bashrc"
        rc.write_text("echo hi")
        ShellProfile(rc).append_once('export Z="3"')
        lines = rc.read_text().splitlines()
        assert lines[0] == "echo hi"
        assert lines[-1] == 'export Z="3"'

    def test_blank_lines_ignored(self, tmp_path: Path):
        profile = ShellProfile(tmp_path / ".bashrc")
        assert profile.ensure_lines(["", "   "]) == []
        assert profile.read() == ""

    def test_non_utf8_profile(self, tmp_path: Path):
        rc = tmp_path / ".bashrc"
        rc.write_bytes(b'# caf\xe9\nexport X="1"\n')
        profile = ShellProfile(rc)
        assert profile.contains('export X="1"')
        assert profile.ensure_lines(['export X="1"', 'export Y="2"']) == ['export Y="2"']
        content = rc.read_bytes()
        assert content.startswith(b'# caf\xe9\nexport X="1"\n')
        assert content.endswith(b'export Y="2"\n')
