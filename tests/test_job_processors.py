"""
Job processor tests
Placeholder audio, output paths, AI descriptions and failure handling
"""
import json
from pathlib import Path

import httpx
import pytest
import soundfile as sf

from audiostudio.core.errors import ProcessingFailure
from audiostudio.services.ai_providers import AnthropicProvider, MusicDescriptionService, OpenAIProvider
from audiostudio.services.job_processor import copy_or_placeholder, write_silent_wav
from audiostudio.services.music_generation_service import MusicGenerationProcessor
from audiostudio.services.stem_separation_service import StemSeparationProcessor
from audiostudio.services.voice_cloning_service import VoiceCloningProcessor


def anthropic_reply(text):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})
    return handler


def failing_reply(status, message):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": {"message": message}})
    return handler


@pytest.mark.unit
class TestPlaceholderAudio:
    """Silent WAV helpers"""

    def test_write_silent_wav(self, tmp_path):
        target = tmp_path / "nested" / "silence.wav"

        write_silent_wav(target, 0.5, 8000)

        info = sf.info(str(target))
        assert info.samplerate == 8000
        assert info.frames == 4000
        assert info.channels == 1

    def test_copy_existing_source(self, tmp_path, wav_bytes):
        source = tmp_path / "source.wav"
        source.write_bytes(wav_bytes)
        target = tmp_path / "out" / "copy.wav"

        copy_or_placeholder(str(source), target, 1.0, 8000)

        assert target.read_bytes() == wav_bytes

    def test_missing_source_becomes_silence(self, tmp_path):
        target = tmp_path / "out" / "missing.wav"

        copy_or_placeholder(str(tmp_path / "nope.wav"), target, 0.1, 8000)

        assert sf.info(str(target)).frames == 800


@pytest.mark.integration
class TestStemSeparationProcessor:

    @pytest.mark.asyncio
    async def test_completes_with_one_path_per_stem(self, memory_storage, project, test_settings, tmp_path, wav_bytes):
        source = tmp_path / "mix.wav"
        source.write_bytes(wav_bytes)
        job = await memory_storage.create_stem_separation_job({
            "project_id": project.id, "original_path": str(source)
        })

        final = await StemSeparationProcessor(memory_storage, test_settings).process(job)

        assert final.status == "completed"
        assert final.error is None
        assert set(final.output_paths) == {"vocals", "drums", "bass", "other"}
        for stem, path in final.output_paths.items():
            assert Path(path).name == f"{stem}.wav"
            assert Path(path).parent.name == f"stem_separation_{job.id}"
            assert Path(path).read_bytes() == wav_bytes

    @pytest.mark.asyncio
    async def test_stored_job_matches_returned_job(self, memory_storage, project, test_settings):
        job = await memory_storage.create_stem_separation_job({
            "project_id": project.id, "original_path": "/does/not/exist.wav"
        })

        final = await StemSeparationProcessor(memory_storage, test_settings).process(job)

        assert await memory_storage.get_stem_separation_job(job.id) == final
        assert all(Path(p).is_file() for p in final.output_paths.values())

    @pytest.mark.asyncio
    async def test_failure_records_error_without_outputs(self, memory_storage, project, test_settings, monkeypatch):
        job = await memory_storage.create_stem_separation_job({
            "project_id": project.id, "original_path": "/x.wav"
        })
        processor = StemSeparationProcessor(memory_storage, test_settings)

        async def explode(job):
            raise ProcessingFailure("separation model crashed")

        monkeypatch.setattr(processor, "_process_internal", explode)

        final = await processor.process(job)

        assert final.status == "failed"
        assert final.error == "separation model crashed"
        assert final.output_paths is None


@pytest.mark.integration
class TestVoiceCloningProcessor:

    @pytest.mark.asyncio
    async def test_completes_with_cloned_voice_file(self, memory_storage, project, test_settings):
        job = await memory_storage.create_voice_cloning_job({
            "project_id": project.id, "sample_path": "/missing.wav", "text": "Hello there"
        })

        final = await VoiceCloningProcessor(memory_storage, test_settings).process(job)

        assert final.status == "completed"
        assert Path(final.output_path).name == f"cloned_voice_{job.id}.wav"
        assert Path(final.output_path).is_file()

    @pytest.mark.asyncio
    async def test_error_message_falls_back_to_exception_name(self, memory_storage, project, test_settings, monkeypatch):
        job = await memory_storage.create_voice_cloning_job({
            "project_id": project.id, "sample_path": "/v.wav", "text": "hi"
        })
        processor = VoiceCloningProcessor(memory_storage, test_settings)

        async def explode(job):
            raise RuntimeError()

        monkeypatch.setattr(processor, "_process_internal", explode)

        final = await processor.process(job)

        assert final.status == "failed"
        assert final.error == "RuntimeError"
        assert final.output_path is None


@pytest.mark.integration
class TestMusicGenerationProcessor:

    @pytest.mark.asyncio
    async def test_completes_without_description_service(self, memory_storage, project, test_settings):
        job = await memory_storage.create_music_generation_job({
            "project_id": project.id, "prompt": "chill lofi beat"
        })

        final = await MusicGenerationProcessor(memory_storage, test_settings).process(job)

        assert final.status == "completed"
        assert Path(final.output_path).name == f"ai_generated_{job.id}.wav"
        assert Path(final.output_path).is_file()
        assert not Path(final.output_path).with_suffix(".json").exists()

    @pytest.mark.asyncio
    async def test_default_sample_is_copied(self, memory_storage, project, test_settings, tmp_path, wav_bytes):
        sample = tmp_path / "default.wav"
        sample.write_bytes(wav_bytes)
        settings = test_settings.model_copy(update={"DEFAULT_SAMPLE_PATH": str(sample)})
        job = await memory_storage.create_music_generation_job({
            "project_id": project.id, "prompt": "anything"
        })

        final = await MusicGenerationProcessor(memory_storage, settings).process(job)

        assert Path(final.output_path).read_bytes() == wav_bytes

    @pytest.mark.asyncio
    async def test_description_is_written_next_to_audio(self, memory_storage, project, test_settings):
        provider = AnthropicProvider(
            "test-key", "test-model", "https://anthropic.test/v1",
            transport=httpx.MockTransport(anthropic_reply("A mellow beat at 80 BPM."))
        )
        service = MusicDescriptionService([provider])
        job = await memory_storage.create_music_generation_job({
            "project_id": project.id, "prompt": "chill lofi beat"
        })

        final = await MusicGenerationProcessor(memory_storage, test_settings, service).process(job)
        await service.aclose()

        document = json.loads(Path(final.output_path).with_suffix(".json").read_text())
        assert final.status == "completed"
        assert document == {
            "jobId": job.id,
            "prompt": "chill lofi beat",
            "description": "A mellow beat at 80 BPM.",
        }

    @pytest.mark.asyncio
    async def test_provider_failure_fails_the_job(self, memory_storage, project, test_settings):
        provider = OpenAIProvider(
            "bad-key", "test-model", "https://openai.test/v1",
            transport=httpx.MockTransport(failing_reply(401, "Invalid API key"))
        )
        service = MusicDescriptionService([provider])
        job = await memory_storage.create_music_generation_job({
            "project_id": project.id, "prompt": "epic trailer"
        })

        final = await MusicGenerationProcessor(memory_storage, test_settings, service).process(job)
        await service.aclose()

        assert final.status == "failed"
        assert final.error == "OpenAI API error: 401 - Invalid API key"
        assert final.output_path is None
