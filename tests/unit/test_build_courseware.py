"""
Unit tests for build_courseware.py (CLI pipeline without the AI collaborator)
"""
import argparse

import pytest

import build_courseware


def make_args(**overrides):
    values = dict(
        input=None,
        name=None,
        output_dir=None,
        suggest=False,
        skip_ai=True,
        project_id=None,
        show_config=False,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def cli_repository(repository, monkeypatch):
    monkeypatch.setattr(build_courseware, "ProjectRepository", lambda: repository)
    return repository


class TestBuild:

    @pytest.mark.asyncio
    async def test_stored_project_is_paginated_and_exported(
        self, cli_repository, sample_project, temp_dir, capsys
    ):
        cli_repository.save(sample_project)
        args = make_args(project_id=sample_project.id, output_dir=str(temp_dir / "out"))

        assert await build_courseware.build(args) == 0

        out = capsys.readouterr().out
        assert "Table of Contents" in out
        assert "Chapter 1: Service Basics" in out
        assert "pages)" in out
        assert (temp_dir / "out" / "Service Basics.doc").exists()
        assert (temp_dir / "out" / "Service Basics.html").exists()

        stored = cli_repository.load(sample_project.id)
        assert stored.blocks[0].page_number is not None

    @pytest.mark.asyncio
    async def test_text_import_without_ai(self, cli_repository, temp_dir):
        source = temp_dir / "notes.txt"
        source.write_text("Plain source text", encoding="utf-8")
        args = make_args(input=str(source), output_dir=str(temp_dir / "out"))

        assert await build_courseware.build(args) == 0

        projects = cli_repository.list_projects()
        assert [p.name for p in projects] == ["notes"]
        assert projects[0].raw_content == "Plain source text"

    @pytest.mark.asyncio
    async def test_missing_input_file(self, cli_repository, temp_dir):
        assert await build_courseware.build(make_args(input=str(temp_dir / "nope.txt"))) == 1

    @pytest.mark.asyncio
    async def test_show_config(self, cli_repository, sample_project, temp_dir, capsys):
        cli_repository.save(sample_project)
        args = make_args(project_id=sample_project.id, output_dir=str(temp_dir), show_config=True)
        await build_courseware.build(args)
        assert "CONFIGURATION" in capsys.readouterr().out
