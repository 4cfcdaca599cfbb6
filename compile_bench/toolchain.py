"""
Toolchain locator.

Maps a compiler tag (``msvc``, ``clang``, ``gcc``) to a :class:`Toolchain`
that knows how to find the compiler on this host and how to spell a
compile-only command line for it.
"""

import functools
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .errors import ToolchainNotFoundError

VSWHERE_ARGS = [
    "-latest",
    "-prerelease",
    "-products",
    "*",
    "-requires",
    "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
    "-property",
    "installationPath",
]


class Toolchain(ABC):
    """Abstract base class for compiler toolchains"""

    compiler_exe: str = ""

    @abstractmethod
    def locate(self) -> Optional[Dict[str, str]]:
        """Find the compiler; return the environment to run it in (None = inherit)"""
        pass

    @abstractmethod
    def compile_command(self, source: str, artifact: str, optimize: bool) -> List[str]:
        """Compile-only command turning ``source`` into ``artifact``"""
        pass

    @abstractmethod
    def get_artifact_name(self) -> str:
        pass


class MsvcToolchain(Toolchain):
    """``cl`` inside a Visual Studio developer environment"""

    compiler_exe = "cl"
    arch = "x64"

    # vcvarsall is slow, capture its environment once per process
    _environment_cache: Dict[str, Dict[str, str]] = {}

    def locate(self) -> Optional[Dict[str, str]]:
        env = self._environment_cache.get(self.arch)
        if env is None:
            env = self._capture_vcvars_environment(self._find_vcvarsall())
            self._environment_cache[self.arch] = env

        if shutil.which(self.compiler_exe, path=_env_path(env)) is None:
            raise ToolchainNotFoundError(
                f"{self.compiler_exe} not found in the Visual Studio environment"
            )
        return env

    def compile_command(self, source: str, artifact: str, optimize: bool) -> List[str]:
        return [
            self.compiler_exe,
            "/nologo",
            "/O2" if optimize else "/Od",
            "/c",
            source,
            f"/Fo{artifact}",
        ]

    def get_artifact_name(self) -> str:
        return "test.obj"

    def _find_vcvarsall(self) -> Path:
        program_files = os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")
        vswhere = Path(program_files) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"
        if not vswhere.exists():
            raise ToolchainNotFoundError("vswhere.exe not found")

        completed = subprocess.run(
            [str(vswhere), *VSWHERE_ARGS], capture_output=True, text=True
        )
        install_path = completed.stdout.strip()
        if completed.returncode != 0 or not install_path:
            raise ToolchainNotFoundError("No Visual Studio installation with C++ tools found")

        vcvarsall = Path(install_path) / "VC" / "Auxiliary" / "Build" / "vcvarsall.bat"
        if not vcvarsall.exists():
            raise ToolchainNotFoundError("vcvarsall.bat not found")
        return vcvarsall

    def _capture_vcvars_environment(self, vcvarsall: Path) -> Dict[str, str]:
        completed = subprocess.run(
            f'call "{vcvarsall}" {self.arch} >nul && set',
            shell=True,
            capture_output=True,
            text=True,
        )
        if completed.returncode != 0:
            raise ToolchainNotFoundError(
                f"vcvarsall.bat {self.arch} failed with exit code {completed.returncode}"
            )
        return parse_environment(completed.stdout)


class ClangClToolchain(MsvcToolchain):
    """``clang-cl`` using the MSVC headers and libraries"""

    compiler_exe = "clang-cl"


class GnuToolchain(Toolchain):
    """gcc or clang found on PATH"""

    def __init__(self, compiler_exe: str):
        self.compiler_exe = compiler_exe
        self.executable: Optional[str] = None

    def locate(self) -> Optional[Dict[str, str]]:
        self.executable = shutil.which(self.compiler_exe)
        if self.executable is None:
            raise ToolchainNotFoundError(f"{self.compiler_exe} not found on PATH")
        return None

    def compile_command(self, source: str, artifact: str, optimize: bool) -> List[str]:
        return [
            self.executable or self.compiler_exe,
            "-O2" if optimize else "-O0",
            "-c",
            source,
            "-o",
            artifact,
        ]

    def get_artifact_name(self) -> str:
        return "test.o"


def parse_environment(output: str) -> Dict[str, str]:
    """Parse ``set`` output (``NAME=value`` per line) into a dict"""
    env = {}
    for line in output.splitlines():
        name, sep, value = line.partition("=")
        if sep and name:
            env[name] = value
    return env


def _env_path(env: Dict[str, str]) -> Optional[str]:
    # Windows spells it Path, and environment names are case-insensitive there
    for name, value in env.items():
        if name.upper() == "PATH":
            return value
    return None


class ToolchainRegistry:
    """Registry for managing compiler toolchains by tag"""

    def __init__(self):
        self._toolchains: Dict[str, Callable[[], Toolchain]] = {}
        self._register_builtin_toolchains()

    def _register_builtin_toolchains(self):
        """Register built-in toolchains"""
        self.register("msvc", MsvcToolchain)
        self.register("gcc", functools.partial(GnuToolchain, "gcc"))
        if os.name == "nt":
            self.register("clang", ClangClToolchain)
        else:
            self.register("clang", functools.partial(GnuToolchain, "clang"))

    def register(self, name: str, factory: Callable[[], Toolchain]) -> None:
        """Register a toolchain factory for a compiler tag"""
        self._toolchains[name.lower()] = factory

    def create(self, name: str) -> Toolchain:
        """Create the toolchain for the given compiler tag"""
        factory = self._toolchains.get(name.lower())
        if factory is None:
            raise ToolchainNotFoundError(f"No toolchain registered for compiler: {name}")
        return factory()

    def get_available_compilers(self) -> List[str]:
        return list(self._toolchains.keys())
