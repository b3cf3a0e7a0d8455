#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Project Record - The persisted unit of a courseware project.

Dict form (as stored):
    {id, name, rawContent, suggestedContent, structuredContent, styles, images}
"""

import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping

from config.constants import ID_ALPHABET, ID_RANDOM_LENGTH, PROJECT_ID_PREFIX
from core.formatting.content_model import Document, blocks_from_list, blocks_to_list
from core.formatting.style_config import StyleConfig, default_styles


STARTER_CONTENT = """# Introduction to Customer Service: The Service Success Formula
## Trainee Review Handout (A4 edition)
### Presenter: Training Team

[Trainer's note] In customer service, attitude sets the ceiling and habits shape the future.

## Opening and Course Focus
Welcome to the program. Before we get into any technique, we start with the mindset behind good service.
[Key points]
- **Mindset first**: techniques matter, but your attitude and habits matter more.
- **Success needs the whole picture**: no single skill makes a service career; you need a complete way of thinking.

[Trainee activity]
Scan the QR code on the screen and answer this question: "Why did I choose to work in service?"
"""


def generate_project_id() -> str:
    """``proj_<epoch ms>_<7 base36 chars>``"""
    suffix = "".join(random.choice(ID_ALPHABET) for _ in range(ID_RANDOM_LENGTH))
    return f"{PROJECT_ID_PREFIX}{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True)
class ProjectRecord:
    """One courseware project: source text, structured document, styles and images."""
    id: str
    name: str
    raw_content: str = ""
    suggested_content: str = ""
    blocks: Document = ()
    styles: StyleConfig = field(default_factory=default_styles)
    images: Mapping[str, str] = field(default_factory=dict)

    def with_updates(self, **changes: Any) -> "ProjectRecord":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'rawContent': self.raw_content,
            'suggestedContent': self.suggested_content,
            'structuredContent': blocks_to_list(self.blocks),
            'styles': self.styles.to_dict(),
            'images': dict(self.images),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectRecord":
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            raw_content=data.get('rawContent') or '',
            suggested_content=data.get('suggestedContent') or '',
            blocks=blocks_from_list(data.get('structuredContent') or []),
            styles=StyleConfig.from_dict(data.get('styles') or {}),
            images=dict(data.get('images') or {}),
        )


def new_project(name: str, raw_content: str = STARTER_CONTENT) -> ProjectRecord:
    """Create a fresh project with default styles and starter text."""
    return ProjectRecord(
        id=generate_project_id(),
        name=name,
        raw_content=raw_content,
    )
