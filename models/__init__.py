from .note import ExpertNote
