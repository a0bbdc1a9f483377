from __future__ import annotations

import os

import pytest

from ggml_probe.config import BackendOptions
from ggml_probe.io.file_reader import MappedFile
from ggml_probe.llm import factory
from ggml_probe.llm.base import BackendError, Model
from ggml_probe.model_formats.ggml.ggml import (
    FILE_MAGIC_GGJT,
    FILE_MAGIC_GGML,
    DispatchError,
    FormatError,
    VersionError,
)
from ggml_probe.model_formats.ggml.ggml_hparams import HYPERPARAMETER_READERS, read_llama


class RecordingModel(Model):
    def __init__(self, model_path: str, options: BackendOptions):
        self.model_path = model_path
        self.options = options
        self.closed = False

    def predict(self, tokens, prompt, on_token) -> None:
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_llama(monkeypatch):
    monkeypatch.setitem(factory.BACKENDS, "llama", RecordingModel)


def test_new_model_dispatches_to_llama_backend(fake_llama, model_file, header) -> None:
    path = model_file(header(FILE_MAGIC_GGJT, 3))
    opts = BackendOptions(num_ctx=4096)
    model = factory.new_model(path, opts)
    assert isinstance(model, RecordingModel)
    assert model.model_path == path
    assert model.options is opts
    with model:
        pass
    assert model.closed


def test_new_model_defaults_options(fake_llama, model_file, header) -> None:
    model = factory.new_model(model_file(header(FILE_MAGIC_GGML)))
    assert model.options == BackendOptions()


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        factory.new_model(str(tmp_path / "missing.bin"), BackendOptions())


@pytest.mark.parametrize(
    "data_args, error",
    [
        ((0xDEADBEEF,), FormatError),
        ((FILE_MAGIC_GGJT, 7), VersionError),
    ],
)
def test_decode_errors_propagate(fake_llama, model_file, header, data_args, error) -> None:
    with pytest.raises(error):
        factory.new_model(model_file(header(*data_args)), BackendOptions())


def test_unsupported_hint(fake_llama, model_file, header) -> None:
    with pytest.raises(DispatchError, match="unsupported model type: gpt2"):
        factory.new_model(model_file(header(FILE_MAGIC_GGML)), hint="gpt2")


def test_model_type_without_backend(monkeypatch, model_file, header) -> None:
    monkeypatch.setitem(HYPERPARAMETER_READERS, "gptj", read_llama)
    with pytest.raises(DispatchError, match="unknown ggml type: gptj"):
        factory.new_model(model_file(header(FILE_MAGIC_GGML)), hint="gptj")


class FailingModel(Model):
    def __init__(self, model_path: str, options: BackendOptions):
        raise BackendError("backend refused the model")

    def predict(self, tokens, prompt, on_token) -> None:
        pass

    def close(self) -> None:
        pass


@pytest.fixture
def exited(monkeypatch):
    """MappedFile instances whose context was exited, in order."""
    seen: list = []
    real_exit = MappedFile.__exit__

    def tracking_exit(self, exc_type, exc, tb):
        seen.append(self)
        return real_exit(self, exc_type, exc, tb)

    monkeypatch.setattr(MappedFile, "__exit__", tracking_exit)
    return seen


def _assert_released(exited) -> None:
    assert len(exited) == 1
    mf = exited[0]
    assert mf._fd is None
    assert mf._m is None
    with pytest.raises(RuntimeError):
        _ = mf.view


@pytest.mark.parametrize(
    "data_args, error",
    [
        ((0xDEADBEEF,), FormatError),
        ((FILE_MAGIC_GGJT, 7), VersionError),
    ],
)
def test_mapping_released_when_decode_fails(
    fake_llama, exited, model_file, header, data_args, error
) -> None:
    with pytest.raises(error):
        factory.new_model(model_file(header(*data_args)), BackendOptions())
    _assert_released(exited)


def test_mapping_released_when_backend_fails(monkeypatch, exited, model_file, header) -> None:
    monkeypatch.setitem(factory.BACKENDS, "llama", FailingModel)
    with pytest.raises(BackendError, match="refused"):
        factory.new_model(model_file(header(FILE_MAGIC_GGJT, 3)), BackendOptions())
    _assert_released(exited)


def test_mapping_released_on_success(fake_llama, exited, model_file, header) -> None:
    factory.new_model(model_file(header(FILE_MAGIC_GGML)), BackendOptions())
    _assert_released(exited)


@pytest.mark.skipif(not os.path.isdir("/proc/self/fd"), reason="needs /proc/self/fd")
def test_no_descriptor_leaks_across_failures(monkeypatch, model_file, header) -> None:
    monkeypatch.setitem(factory.BACKENDS, "llama", FailingModel)
    bad_magic = model_file(header(0xDEADBEEF), name="bad.bin")
    good = model_file(header(FILE_MAGIC_GGJT, 1), name="good.bin")
    before = len(os.listdir("/proc/self/fd"))
    for _ in range(5):
        with pytest.raises(FormatError):
            factory.new_model(bad_magic, BackendOptions())
        with pytest.raises(BackendError):
            factory.new_model(good, BackendOptions())
    assert len(os.listdir("/proc/self/fd")) == before


def test_unreadable_file(monkeypatch, model_file, header) -> None:
    path = model_file(header(FILE_MAGIC_GGML))
    monkeypatch.setattr(factory.os, "access", lambda p, mode: False)
    with pytest.raises(PermissionError) as exc:
        factory.new_model(path, BackendOptions())
    assert exc.value.filename == path
