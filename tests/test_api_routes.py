"""
HTTP API tests
Status codes, camelCase bodies and error messages of the /api routes
"""
from pathlib import Path

import pytest


async def create_project(client, **overrides):
    payload = {"name": "API Project", "userId": 1, "bpm": 128, **overrides}
    response = await client.post("/api/projects", json=payload)
    assert response.status_code == 201
    return response.json()


async def create_track(client, project_id, **overrides):
    payload = {"name": "Vocals", "type": "vocals", "projectId": project_id, "color": "#4ade80", **overrides}
    response = await client.post("/api/tracks", json=payload)
    assert response.status_code == 201
    return response.json()


async def create_clip(client, track_id, **overrides):
    payload = {
        "name": "take.wav",
        "trackId": track_id,
        "path": "/samples/take.wav",
        "startTime": 0,
        "duration": 2000,
        **overrides,
    }
    response = await client.post("/api/clips", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": "0.1.0",
            "storageBackend": "memory",
            "pendingJobs": 0,
        }


@pytest.mark.integration
class TestProjectRoutes:

    @pytest.mark.asyncio
    async def test_create_returns_camel_case(self, api_client):
        project = await create_project(api_client)

        assert project["name"] == "API Project"
        assert project["userId"] == 1
        assert project["timeSignature"] == "4/4"
        assert "createdAt" in project and "updatedAt" in project

    @pytest.mark.asyncio
    async def test_list_requires_valid_user_id(self, api_client):
        for query in ("", "?userId=abc"):
            response = await api_client.get(f"/api/projects{query}")
            assert response.status_code == 400
            assert response.json() == {"message": "Valid userId is required"}

    @pytest.mark.asyncio
    async def test_list_by_user(self, api_client):
        await create_project(api_client, name="Mine")
        await create_project(api_client, name="Theirs", userId=2)

        response = await api_client.get("/api/projects?userId=1")

        assert [p["name"] for p in response.json()] == ["Mine"]

    @pytest.mark.asyncio
    async def test_get_missing_project(self, api_client):
        response = await api_client.get("/api/projects/999")

        assert response.status_code == 404
        assert response.json() == {"message": "Project not found"}

    @pytest.mark.asyncio
    async def test_update_project(self, api_client):
        project = await create_project(api_client)

        response = await api_client.put(f"/api/projects/{project['id']}", json={"bpm": 90})

        assert response.status_code == 200
        assert response.json()["bpm"] == 90
        assert response.json()["name"] == "API Project"

    @pytest.mark.asyncio
    async def test_update_missing_project(self, api_client):
        response = await api_client.put("/api/projects/999", json={"name": "Ghost"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_body(self, api_client):
        response = await api_client.post("/api/projects", json={"name": "", "userId": 1})

        assert response.status_code == 400
        assert "name" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_unknown_user(self, api_client):
        response = await api_client.post("/api/projects", json={"name": "Orphan", "userId": 999})
        listed = await api_client.get("/api/projects?userId=999")

        assert response.status_code == 404
        assert response.json() == {"message": "User with id 999 not found"}
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_delete_project_and_its_tracks(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])

        first = await api_client.delete(f"/api/projects/{project['id']}")
        second = await api_client.delete(f"/api/projects/{project['id']}")

        assert first.status_code == 204
        assert second.status_code == 404
        assert (await api_client.get(f"/api/tracks/{track['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_project_tracks(self, api_client):
        project = await create_project(api_client)
        await create_track(api_client, project["id"], name="Vocals")
        await create_track(api_client, project["id"], name="Drums", type="drums")

        response = await api_client.get(f"/api/projects/{project['id']}/tracks")

        assert [t["name"] for t in response.json()] == ["Vocals", "Drums"]

    @pytest.mark.asyncio
    async def test_project_jobs(self, api_client):
        project = await create_project(api_client)
        await api_client.post("/api/music-generation", json={"prompt": "lofi", "projectId": project["id"]})

        response = await api_client.get(f"/api/projects/{project['id']}/jobs")

        body = response.json()
        assert response.status_code == 200
        assert body["stemSeparation"] == []
        assert body["voiceCloning"] == []
        assert [j["prompt"] for j in body["musicGeneration"]] == ["lofi"]
        assert (await api_client.get("/api/projects/999/jobs")).status_code == 404


@pytest.mark.integration
class TestTrackAndClipRoutes:

    @pytest.mark.asyncio
    async def test_track_defaults_and_partial_update(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])

        assert track["volume"] == 75
        assert track["muted"] is False

        response = await api_client.put(f"/api/tracks/{track['id']}", json={"volume": 50})

        assert response.json()["volume"] == 50
        assert response.json()["color"] == "#4ade80"

    @pytest.mark.asyncio
    async def test_track_volume_out_of_range(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])

        response = await api_client.put(f"/api/tracks/{track['id']}", json={"volume": 101})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_track_for_missing_project(self, api_client):
        response = await api_client.post("/api/tracks", json={
            "name": "Orphan", "type": "bass", "projectId": 999, "color": "#000"
        })

        assert response.status_code == 404
        assert response.json() == {"message": "Project with id 999 not found"}

    @pytest.mark.asyncio
    async def test_clip_alias_and_listing(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        clip = await create_clip(api_client, track["id"], isAIGenerated=True)

        assert clip["isAIGenerated"] is True
        assert clip["startTime"] == 0

        clips = (await api_client.get(f"/api/tracks/{track['id']}/clips")).json()
        assert [c["id"] for c in clips] == [clip["id"]]

    @pytest.mark.asyncio
    async def test_clip_crud(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        clip = await create_clip(api_client, track["id"])

        updated = await api_client.put(f"/api/clips/{clip['id']}", json={"startTime": 4000})
        assert updated.json()["startTime"] == 4000
        assert updated.json()["duration"] == 2000

        assert (await api_client.delete(f"/api/clips/{clip['id']}")).status_code == 204
        missing = await api_client.get(f"/api/clips/{clip['id']}")
        assert missing.status_code == 404
        assert missing.json() == {"message": "Audio clip not found"}

    @pytest.mark.asyncio
    async def test_clip_needs_positive_duration(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])

        response = await api_client.post("/api/clips", json={
            "name": "x", "trackId": track["id"], "path": "/x.wav", "startTime": 0, "duration": 0
        })

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_all_clips_of_a_user(self, api_client):
        first = await create_project(api_client)
        second = await create_project(api_client, name="Second")
        other = await create_project(api_client, name="Other", userId=2)
        for project in (first, second, other):
            track = await create_track(api_client, project["id"])
            await create_clip(api_client, track["id"], name=f"{project['name']}.wav")

        default_user = await api_client.get("/api/tracks/all/clips")
        user_two = await api_client.get("/api/tracks/all/clips?userId=2")

        assert [c["name"] for c in default_user.json()] == ["API Project.wav", "Second.wav"]
        assert [c["name"] for c in user_two.json()] == ["Other.wav"]


@pytest.mark.integration
class TestEffectRoutes:

    @pytest.mark.asyncio
    async def test_create_reverb(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])

        response = await api_client.post("/api/effects", json={
            "name": "Hall",
            "type": "reverb",
            "trackId": track["id"],
            "settings": {"roomSize": 70, "dampening": 30, "width": 90, "wetDry": 25},
        })

        assert response.status_code == 201
        assert response.json()["settings"] == {"roomSize": 70, "dampening": 30, "width": 90, "wetDry": 25}
        assert response.json()["enabled"] is True

    @pytest.mark.asyncio
    async def test_invalid_settings_for_type(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])

        response = await api_client.post("/api/effects", json={
            "name": "Comp",
            "type": "compressor",
            "trackId": track["id"],
            "settings": {"threshold": 6, "ratio": 4, "attack": 0.01, "release": 0.1},
        })

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_settings_checked_against_stored_type(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        effect = (await api_client.post("/api/effects", json={
            "name": "EQ",
            "type": "eq",
            "trackId": track["id"],
            "settings": {"bands": [{"frequency": 100, "gain": 2}]},
        })).json()

        bad = await api_client.put(f"/api/effects/{effect['id']}", json={
            "settings": {"bands": [{"frequency": -5, "gain": 2}]}
        })
        good = await api_client.put(f"/api/effects/{effect['id']}", json={
            "settings": {"bands": [{"frequency": 200, "gain": -3}]}, "enabled": False
        })

        assert bad.status_code == 400
        assert good.status_code == 200
        assert good.json()["settings"] == {"bands": [{"frequency": 200, "gain": -3}]}
        assert good.json()["enabled"] is False

    @pytest.mark.asyncio
    async def test_type_change_rechecks_stored_settings(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        effect = (await api_client.post("/api/effects", json={
            "name": "Hall",
            "type": "reverb",
            "trackId": track["id"],
            "settings": {"roomSize": 70, "dampening": 30, "width": 90, "wetDry": 25},
        })).json()

        bad = await api_client.put(f"/api/effects/{effect['id']}", json={"type": "compressor"})
        unchanged = await api_client.get(f"/api/effects/{effect['id']}")
        good = await api_client.put(f"/api/effects/{effect['id']}", json={
            "type": "compressor",
            "settings": {"threshold": -18, "ratio": 3, "attack": 0.005, "release": 0.1},
        })

        assert bad.status_code == 400
        assert unchanged.json()["type"] == "reverb"
        assert good.status_code == 200
        assert good.json()["type"] == "compressor"
        assert good.json()["settings"]["makeupGain"] == 0

    @pytest.mark.asyncio
    async def test_track_effects_and_delete(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        effect = (await api_client.post("/api/effects", json={
            "name": "Chorus", "type": "chorus", "trackId": track["id"], "settings": {"depth": 0.4}
        })).json()

        listed = await api_client.get(f"/api/tracks/{track['id']}/effects")
        assert [e["id"] for e in listed.json()] == [effect["id"]]
        assert listed.json()[0]["settings"] == {"depth": 0.4}

        assert (await api_client.delete(f"/api/effects/{effect['id']}")).status_code == 204
        assert (await api_client.delete(f"/api/effects/{effect['id']}")).status_code == 404


@pytest.mark.integration
class TestJobRoutes:

    @pytest.mark.asyncio
    async def test_stem_separation_upload(self, api_client, app, wav_bytes):
        project = await create_project(api_client)

        response = await api_client.post(
            "/api/stem-separation",
            files={"file": ("mix.wav", wav_bytes, "audio/wav")},
            data={"projectId": str(project["id"])},
        )

        job = response.json()
        assert response.status_code == 201
        assert job["status"] == "pending"
        assert job["projectId"] == project["id"]
        assert Path(job["originalPath"]).read_bytes() == wav_bytes

        await app.state.dispatcher.drain()
        polled = (await api_client.get(f"/api/stem-separation/{job['id']}")).json()
        assert polled["status"] == "completed"
        assert set(polled["outputPaths"]) == {"vocals", "drums", "bass", "other"}

    @pytest.mark.asyncio
    async def test_stem_separation_validation(self, api_client, wav_bytes):
        project = await create_project(api_client)

        no_file = await api_client.post("/api/stem-separation", data={"projectId": str(project["id"])})
        no_project = await api_client.post(
            "/api/stem-separation", files={"file": ("mix.wav", wav_bytes, "audio/wav")}
        )
        missing_project = await api_client.post(
            "/api/stem-separation",
            files={"file": ("mix.wav", wav_bytes, "audio/wav")},
            data={"projectId": "999"},
        )
        wrong_type = await api_client.post(
            "/api/stem-separation",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"projectId": str(project["id"])},
        )

        assert no_file.status_code == 400
        assert no_file.json() == {"message": "Audio file is required"}
        assert no_project.status_code == 400
        assert no_project.json() == {"message": "Valid projectId is required"}
        assert missing_project.status_code == 404
        assert wrong_type.status_code == 400
        assert wrong_type.json()["message"].startswith("Unsupported file type")

    @pytest.mark.asyncio
    async def test_voice_cloning_upload(self, api_client, app, wav_bytes):
        project = await create_project(api_client)

        response = await api_client.post(
            "/api/voice-cloning",
            files={"sample": ("voice.wav", wav_bytes, "audio/wav")},
            data={"projectId": str(project["id"]), "text": "Hello world"},
        )

        job = response.json()
        assert response.status_code == 201
        assert job["text"] == "Hello world"
        assert job["outputPath"] is None

        await app.state.dispatcher.drain()
        polled = (await api_client.get(f"/api/voice-cloning/{job['id']}")).json()
        assert polled["status"] == "completed"
        assert polled["outputPath"].endswith(f"cloned_voice_{job['id']}.wav")

    @pytest.mark.asyncio
    async def test_voice_cloning_validation(self, api_client, wav_bytes):
        project = await create_project(api_client)

        no_sample = await api_client.post(
            "/api/voice-cloning", data={"projectId": str(project["id"]), "text": "hi"}
        )
        no_text = await api_client.post(
            "/api/voice-cloning",
            files={"sample": ("voice.wav", wav_bytes, "audio/wav")},
            data={"projectId": str(project["id"]), "text": "   "},
        )

        assert no_sample.json() == {"message": "Voice sample file is required"}
        assert no_text.status_code == 400
        assert no_text.json() == {"message": "Text content is required"}

    @pytest.mark.asyncio
    async def test_music_generation_from_json_and_form(self, api_client, app):
        project = await create_project(api_client)

        from_json = await api_client.post(
            "/api/music-generation", json={"prompt": "uplifting piano", "projectId": project["id"]}
        )
        from_form = await api_client.post(
            "/api/music-generation", data={"prompt": "dark techno", "projectId": str(project["id"])}
        )

        assert from_json.status_code == 201
        assert from_form.status_code == 201
        assert from_form.json()["prompt"] == "dark techno"

        await app.state.dispatcher.drain()
        polled = (await api_client.get(f"/api/music-generation/{from_json.json()['id']}")).json()
        assert polled["status"] == "completed"
        assert polled["error"] is None

    @pytest.mark.asyncio
    async def test_music_generation_validation(self, api_client):
        project = await create_project(api_client)

        no_prompt = await api_client.post("/api/music-generation", json={"projectId": project["id"]})
        no_project = await api_client.post("/api/music-generation", json={"prompt": "x"})

        assert no_prompt.status_code == 400
        assert no_prompt.json() == {"message": "Prompt is required"}
        assert no_project.json() == {"message": "Valid projectId is required"}

    @pytest.mark.asyncio
    async def test_missing_jobs(self, api_client):
        for path, message in (
            ("/api/stem-separation/999", "Stem separation job not found"),
            ("/api/voice-cloning/999", "Voice cloning job not found"),
            ("/api/music-generation/999", "Music generation job not found"),
        ):
            response = await api_client.get(path)
            assert response.status_code == 404
            assert response.json() == {"message": message}


@pytest.mark.integration
class TestMoodTagRoutes:

    @pytest.mark.asyncio
    async def test_mood_tag_crud_and_conflict(self, api_client):
        created = await api_client.post("/api/mood-tags", json={"name": "happy", "color": "#ff0"})
        duplicate = await api_client.post("/api/mood-tags", json={"name": "happy", "color": "#f00"})

        assert created.status_code == 201
        assert created.json()["description"] is None
        assert duplicate.status_code == 400

        tag_id = created.json()["id"]
        updated = await api_client.put(f"/api/mood-tags/{tag_id}", json={"description": "bright"})
        assert updated.json()["description"] == "bright"
        assert [t["name"] for t in (await api_client.get("/api/mood-tags")).json()] == ["happy"]

        assert (await api_client.delete(f"/api/mood-tags/{tag_id}")).status_code == 204
        assert (await api_client.get(f"/api/mood-tags/{tag_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_tagging_a_clip(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        clip = await create_clip(api_client, track["id"])
        tag = (await api_client.post("/api/mood-tags", json={"name": "calm", "color": "#0af"})).json()

        attached = await api_client.post(f"/api/clips/{clip['id']}/mood-tags", json={"moodTagId": tag["id"]})
        again = await api_client.post(f"/api/clips/{clip['id']}/mood-tags", json={"moodTagId": tag["id"]})

        assert attached.status_code == 201
        assert attached.json() == {"audioClipId": clip["id"], "moodTagId": tag["id"], "weight": 5}
        assert again.status_code == 400

        reweighted = await api_client.put(f"/api/clips/{clip['id']}/mood-tags/{tag['id']}", json={"weight": 9})
        assert reweighted.json()["weight"] == 9

        details = (await api_client.get(f"/api/clips/{clip['id']}/mood-tags")).json()
        assert details[0]["weight"] == 9
        assert details[0]["moodTag"]["name"] == "calm"

        tagged = (await api_client.get(f"/api/mood-tags/{tag['id']}/clips")).json()
        assert [c["id"] for c in tagged] == [clip["id"]]

        assert (await api_client.delete(f"/api/clips/{clip['id']}/mood-tags/{tag['id']}")).status_code == 204
        gone = await api_client.delete(f"/api/clips/{clip['id']}/mood-tags/{tag['id']}")
        assert gone.status_code == 404
        assert gone.json() == {"message": "Mood tag is not attached to this clip"}

    @pytest.mark.asyncio
    async def test_weight_out_of_range(self, api_client):
        project = await create_project(api_client)
        track = await create_track(api_client, project["id"])
        clip = await create_clip(api_client, track["id"])
        tag = (await api_client.post("/api/mood-tags", json={"name": "tense", "color": "#800"})).json()

        response = await api_client.post(
            f"/api/clips/{clip['id']}/mood-tags", json={"moodTagId": tag["id"], "weight": 11}
        )

        assert response.status_code == 400
