"""Tests for audio output and the render CLI (filterviz/io.py, filterviz/render_noise.py)."""

import numpy as np
import pytest
import soundfile as sf

from filterviz import io as fio
from filterviz import render_noise
from filterviz.utils import db_to_lin, lin_to_db, output_limit, round_to


@pytest.mark.unit
class TestSaveWav:
    """Test WAV writing through soundfile."""

    def test_round_trip(self, tmp_path, noise):
        """Test a 16-bit file reads back within one quantisation step."""
        path = fio.save_wav(noise, tmp_path / "sub" / "noise.wav", fs=22_050)
        data, fs = sf.read(path)
        info = sf.info(path)
        assert fs == 22_050
        assert info.subtype == "PCM_16"
        assert data == pytest.approx(noise, abs=2.0 / 32767)

    def test_clipping(self, tmp_path):
        """Test out-of-range samples are clamped to full scale."""
        path = fio.save_wav(np.array([2.0, -2.0, 0.0]), tmp_path / "clip.wav")
        data, _ = sf.read(path, dtype="int16")
        assert data[0] == 32767
        assert data[1] <= -32767
        assert data[2] == 0

    def test_float_subtype(self, tmp_path, noise):
        """Test a FLOAT file keeps the engine output exactly (as float32)."""
        path = fio.save_wav(noise, tmp_path / "noise.wav", subtype="float")
        data, _ = sf.read(path, dtype="float32")
        assert sf.info(path).subtype == "FLOAT"
        assert np.array_equal(data, noise.astype(np.float32))

    def test_unknown_subtype(self, tmp_path):
        """Test a subtype WAV cannot hold is refused before writing."""
        with pytest.raises(ValueError):
            fio.save_wav(np.zeros(4), tmp_path / "x.wav", subtype="VORBIS")
        assert not (tmp_path / "x.wav").exists()

    def test_play_without_sounddevice(self, monkeypatch):
        """Test playback degrades to a no-op without the optional backend."""
        monkeypatch.setattr(fio, "sd", None)
        assert fio.play_audio(np.zeros(10)) is False


@pytest.mark.unit
class TestRenderNoise:
    """Test the command line renderer."""

    def test_renders_wav(self, tmp_path, capsys):
        """Test a stable filter is written to disk."""
        out = tmp_path / "out.wav"
        code = render_noise.main(["a1=0.5", "b1=0.9", "--seconds", "0.1", "-o", str(out)])
        assert code == 0
        data, fs = sf.read(out)
        assert fs == 44_100
        assert len(data) == 4410
        assert np.abs(data).max() <= 1.0
        assert "y[n] = x[n] + 0.5x[n - 1] + 0.9y[n - 1]" in capsys.readouterr().out

    def test_unstable_is_not_rendered(self, tmp_path):
        """Test an unstable filter exits with status 1 and writes nothing."""
        out = tmp_path / "bad.wav"
        assert render_noise.main(["b1=1.1", "-o", str(out)]) == 1
        assert not out.exists()

    def test_info_only(self, capsys):
        """Test --info prints the analysis without rendering."""
        assert render_noise.main(["b2=-0.81", "--info"]) == 0
        text = capsys.readouterr().out
        assert "stability : stable" in text
        assert "H(z) = (1) / (1 + 0.81z^-2)" in text

    def test_subtype_option(self, tmp_path):
        """Test --subtype selects the WAV sample format."""
        out = tmp_path / "out24.wav"
        assert render_noise.main(["b1=0.5", "--seconds", "0.05", "--subtype", "PCM_24", "-o", str(out)]) == 0
        assert sf.info(out).subtype == "PCM_24"

    def test_bad_assignment(self):
        """Test a malformed NAME=VALUE argument is reported."""
        assert render_noise.main(["a1"]) == 2


@pytest.mark.unit
class TestUtils:
    """Test the numeric helpers."""

    def test_db_conversions(self):
        """Test dB and linear helpers are inverse within the limits."""
        assert db_to_lin(20.0) == pytest.approx(10.0)
        assert lin_to_db(10.0) == pytest.approx(20.0)
        assert lin_to_db(0.0) == -60.0
        assert lin_to_db(1e-9) == -60.0

    def test_output_limit(self):
        """Test samples are saturated to [-1, 1]."""
        assert output_limit(1.5) == 1.0
        assert output_limit(-3.0) == -1.0
        assert output_limit(0.25) == 0.25

    def test_round_to_half_away_from_zero(self):
        """Test C-style rounding at 4 decimals."""
        assert round_to(0.99996) == 1.0
        assert round_to(-0.12346) == pytest.approx(-0.1235)
        assert round_to(0.9999) == pytest.approx(0.9999)
