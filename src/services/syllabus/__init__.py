# -*- coding: utf-8 -*-
"""
Syllabus Services
=================

Usage:
    from src.services.syllabus import get_syllabus_cache

    syllabus = get_syllabus_cache().get_syllabus_content()
"""

from .cache import SyllabusCache, SyllabusLoadError, SyllabusReference, get_syllabus_cache

__all__ = ["SyllabusCache", "SyllabusLoadError", "SyllabusReference", "get_syllabus_cache"]
