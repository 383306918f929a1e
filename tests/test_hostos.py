import pytest

from cytonaut_bootstrap.errors import UnsupportedPlatform
from cytonaut_bootstrap.lib import hostos
from cytonaut_bootstrap.lib.hostos import PlatformTag, detect_platform


class TestDetectPlatform:
    """OS identifier -> PlatformTag."""

    @pytest.mark.parametrize("name", ["Linux", "Linux 5.15", "Linux-6.1-generic"])
    def test_linux(self, name):
        assert detect_platform(name) is PlatformTag.LINUX

    @pytest.mark.parametrize("name", ["Darwin", "Darwin 23.1.0"])
    def test_macos(self, name):
        assert detect_platform(name) is PlatformTag.MACOS

    @pytest.mark.parametrize("name", ["MINGW64_NT-10.0-19045", "MSYS_NT-10.0", "CYGWIN_NT-10.0"])
    def test_windows_shells(self, name):
        assert detect_platform(name) is PlatformTag.WINDOWS_COMPAT

    @pytest.mark.parametrize("name", ["SomeBSD", "FreeBSD", "Windows", "", "linux"])
    def test_unsupported(self, name):
        with pytest.raises(UnsupportedPlatform) as exc:
            detect_platform(name)
        assert exc.value.exit_code == 1
        assert "Unsupported OS" in str(exc.value)
        assert "PowerShell" in str(exc.value)

    def test_defaults_to_host(self, monkeypatch):
        monkeypatch.setattr(hostos, "host_os_name", lambda: "Darwin")
        assert detect_platform() is PlatformTag.MACOS

    def test_tag_values(self):
        assert {t.value for t in PlatformTag} == {"linux", "macos", "windows-compat"}
        assert str(PlatformTag.LINUX) == "linux"


class TestHostOsName:
    """Native Windows Python started from Git Bash / MSYS2."""

    @pytest.fixture
    def windows(self, monkeypatch):
        monkeypatch.setattr(hostos.platform, "system", lambda: "Windows")
        return monkeypatch

    @pytest.mark.parametrize("msystem", ["MINGW64", "mingw32", "MSYS", "UCRT64", "CLANG64"])
    def test_git_bash_is_windows_compat(self, windows, msystem):
        windows.setenv("MSYSTEM", msystem)
        assert detect_platform() is PlatformTag.WINDOWS_COMPAT

    def test_msystem_passed_through(self, windows):
        windows.setenv("MSYSTEM", "MINGW64")
        assert hostos.host_os_name() == "MINGW64"

    def test_plain_windows_keeps_powershell_hint(self, windows):
        windows.delenv("MSYSTEM", raising=False)
        with pytest.raises(UnsupportedPlatform, match="PowerShell"):
            detect_platform()

    def test_msystem_ignored_off_windows(self, monkeypatch):
        monkeypatch.setattr(hostos.platform, "system", lambda: "Linux")
        monkeypatch.setenv("MSYSTEM", "MINGW64")
        assert detect_platform() is PlatformTag.LINUX
