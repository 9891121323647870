"""
Tests for domain models — platform normalisation, presets, receipts.
"""

import pytest
from pydantic import ValidationError

from nativebuild.core.models import (
    Action,
    ConfigurePreset,
    Generator,
    PlatformDescriptor,
    PresetManifest,
    Receipt,
)


class TestPlatformDescriptor:
    @pytest.mark.parametrize(
        "raw, expected",
        [("Darwin", "macos"), ("Linux", "linux"), ("Windows", "windows"), ("win32", "windows"), ("FreeBSD", "freebsd")],
    )
    def test_os_normalisation(self, raw, expected):
        assert PlatformDescriptor(os_family=raw, arch="x64").os_family == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("x86_64", "x64"), ("AMD64", "x64"), ("aarch64", "arm64"), ("ARM64", "arm64"), ("i686", "i686")],
    )
    def test_arch_normalisation(self, raw, expected):
        assert PlatformDescriptor(os_family="linux", arch=raw).arch == expected

    def test_frozen(self):
        desc = PlatformDescriptor(os_family="linux", arch="x64")
        with pytest.raises(ValidationError):
            desc.arch = "arm64"

    def test_str(self):
        assert str(PlatformDescriptor(os_family="Darwin", arch="arm64")) == "macos/arm64"


class TestConfigurePreset:
    def test_aliases(self):
        preset = ConfigurePreset.model_validate(
            {"name": "a", "binaryDir": "${sourceDir}/b", "cacheVariables": {"X": "1"}}
        )
        assert preset.binary_dir == "${sourceDir}/b"
        assert preset.cache_variables == {"X": "1"}

    def test_cache_value_forms(self):
        preset = ConfigurePreset(
            name="a",
            cacheVariables={
                "PLAIN": "Release",
                "TYPED": {"type": "STRING", "value": "Debug"},
                "FLAG": True,
                "EMPTY": "",
            },
        )
        assert preset.cache_value("PLAIN") == "Release"
        assert preset.cache_value("TYPED") == "Debug"
        assert preset.cache_value("FLAG") == "ON"
        assert preset.cache_value("EMPTY") is None
        assert preset.cache_value("MISSING") is None

    def test_manifest_lookup(self):
        manifest = PresetManifest.model_validate({"configurePresets": [{"name": "x"}, {"name": "y"}]})
        assert manifest.get("y").name == "y"
        assert manifest.names() == ["x", "y"]


class TestGenerator:
    def test_visual_studio_flag(self):
        assert Generator.VISUAL_STUDIO.is_visual_studio
        assert not Generator.NINJA.is_visual_studio


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="command", action_id="build", return_code=0)
        assert r.ok and not r.failed
        assert r.return_code == 0

    def test_failure(self):
        r = Receipt.failure(adapter="command", action_id="configure", error="boom", return_code=2)
        assert r.failed
        assert r.error == "boom"

    def test_skip(self):
        r = Receipt.skip(adapter="filesystem", action_id="clean", reason="nothing")
        assert r.status == "skipped"
        assert r.output == "nothing"

    def test_action_defaults(self):
        a = Action(id="clean", adapter="filesystem")
        assert a.params == {}
