"""
Demo content for a fresh studio: one user, one project with five tracks,
eight clips and a vocal effect chain.
"""

from typing import TYPE_CHECKING

from ..core.logging import storage_logger

if TYPE_CHECKING:
    from .base import StorageInterface

DEMO_USERNAME = "demo"

DEMO_TRACKS = [
    {"name": "Vocals", "type": "vocals", "color": "#4ade80"},
    {"name": "Drums", "type": "drums", "color": "#60a5fa"},
    {"name": "Bass", "type": "bass", "color": "#c084fc"},
    {"name": "Synth", "type": "synth", "color": "#fb923c"},
    {"name": "AI Harmony", "type": "ai-generated", "color": "#7C4DFF"},
]

# (track index, sample name, start ms, duration ms, AI generated)
DEMO_CLIPS = [
    (0, "vocals_main.wav", 3600, 6400, False),
    (0, "cloned_vocals.wav", 10400, 4800, True),
    (1, "drums_main.wav", 2000, 13200, False),
    (2, "bass_main.wav", 2000, 8800, False),
    (3, "synth_intro.wav", 3600, 3200, False),
    (3, "synth_verse.wav", 7200, 4800, False),
    (3, "synth_outro.wav", 12400, 3600, False),
    (4, "ai_generated_melody.wav", 7200, 8800, True),
]

VOCAL_EFFECTS = [
    {
        "name": "Equalizer",
        "type": "eq",
        "settings": {
            "bands": [
                {"frequency": 80, "gain": 3},
                {"frequency": 240, "gain": -2},
                {"frequency": 2500, "gain": 5},
                {"frequency": 10000, "gain": 0},
            ]
        },
    },
    {
        "name": "Reverb",
        "type": "reverb",
        "settings": {
            "roomSize": 72,
            "dampening": 40,
            "width": 85,
            "wetDry": 30,
            "preset": "Medium Hall",
        },
    },
    {
        "name": "Compressor",
        "type": "compressor",
        "settings": {
            "threshold": -24,
            "ratio": 4,
            "attack": 0.003,
            "release": 0.25,
            "knee": 30,
            "makeupGain": 1,
        },
    },
]


async def create_demo_data(storage: "StorageInterface") -> None:
    """Populate the store with the demo project"""
    user = await storage.create_user({"username": DEMO_USERNAME, "password": "password"})
    project = await storage.create_project({
        "name": "Demo Project",
        "user_id": user.id,
        "bpm": 120,
        "time_signature": "4/4",
    })

    tracks = []
    for track in DEMO_TRACKS:
        tracks.append(await storage.create_track({
            **track,
            "project_id": project.id,
            "muted": False,
            "solo": False,
            "volume": 75,
        }))

    for track_index, sample, start_time, duration, ai_generated in DEMO_CLIPS:
        await storage.create_audio_clip({
            "name": sample,
            "track_id": tracks[track_index].id,
            "path": f"/samples/{sample}",
            "start_time": start_time,
            "duration": duration,
            "is_ai_generated": ai_generated,
        })

    for effect in VOCAL_EFFECTS:
        await storage.create_effect({**effect, "track_id": tracks[0].id, "enabled": True})

    storage_logger.log_seeded(
        storage.backend,
        projects=1,
        tracks=len(tracks),
        clips=len(DEMO_CLIPS),
    )
