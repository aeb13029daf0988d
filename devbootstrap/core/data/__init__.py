"""
Static catalogs — default package and extension lists.

Settings start from these lists; a YAML settings file can extend the
apt list or replace the extension list.
"""

from __future__ import annotations

# ── apt ─────────────────────────────────────────────────────────

BASE_PACKAGES: tuple[str, ...] = (
    # shell utilities
    "bash", "coreutils", "git", "openssh-client", "curl", "wget", "jq",
    "unzip", "zip", "tar", "findutils", "file", "less", "nano",
    "ripgrep", "fd-find", "htop", "tree",
    # native toolchain
    "build-essential", "gcc", "g++", "make", "cmake", "ninja-build",
    "meson", "pkg-config", "autoconf", "automake", "libtool",
    "clang", "llvm", "lld", "gdb",
    "python3", "python3-pip",
    # libraries
    "ca-certificates", "openssl", "sqlite3", "libssl-dev", "zlib1g-dev",
    "libsqlite3-dev",
    "libsdl2-dev", "libopenal-dev", "libfreetype6-dev", "libfontconfig1-dev",
    "libpng-dev",
)

JAVA_PACKAGES: tuple[str, ...] = ("openjdk-17-jdk", "gradle")

NODESOURCE_PREREQS: tuple[str, ...] = ("ca-certificates", "curl", "gnupg")

DOTNET_PREREQS: tuple[str, ...] = ("ca-certificates", "wget", "gpg", "apt-transport-https")

MONO_PACKAGES: tuple[str, ...] = ("mono-complete",)
MONO_FALLBACK_PACKAGES: tuple[str, ...] = ("mono-runtime", "mono-devel")

DOCKER_PACKAGES: tuple[str, ...] = ("docker.io", "docker-compose-plugin")

# ── Repositories ────────────────────────────────────────────────

NODESOURCE_KEY_URL = "https://deb.nodesource.com/gpgkey/nodesource-repo.gpg.key"
MICROSOFT_KEY_URL = "https://packages.microsoft.com/keys/microsoft.asc"
DOTNET_INSTALL_URL = "https://dot.net/v1/dotnet-install.sh"
CMDLINE_TOOLS_BASE_URL = "https://dl.google.com/android/repository"

# ── MonoGame ────────────────────────────────────────────────────

MONOGAME_TEMPLATES = "MonoGame.Templates.CSharp"
MONOGAME_MGCB_TOOL = "dotnet-mgcb-editor"

# ── VS Code ─────────────────────────────────────────────────────

VSCODE_EXTENSIONS: tuple[str, ...] = (
    "ms-dotnettools.csharp",
    "ms-dotnettools.csdevkit",
    "ms-dotnettools.vscode-dotnet-runtime",
    "ms-vscode.cpptools",
    "ms-vscode.cmake-tools",
    "eamodio.gitlens",
    "adelphes.android-dev-ext",
    "bbenoist.doxygen",
    "cheshirekow.cmake-format",
    "dart-code.flutter",
    "editorconfig.editorconfig",
    "jajera.vsx-remote-ssh",
    "jeff-hykin.better-cpp-syntax",
    "jnoortheen.nix-ide",
    "redhat.java",
    "redhat.vscode-yaml",
    "vadimcn.vscode-lldb",
)
