from . import clips, effects, jobs, mood_tags, projects, tracks

__all__ = ["clips", "effects", "jobs", "mood_tags", "projects", "tracks"]
