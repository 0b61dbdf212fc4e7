# -*- coding: utf-8 -*-
"""
Markdown Rendering
==================

Renders a StructuredAnalysis into the markdown the study UI consumes. MCQs are
written in the tag markup checked by ``src.utils.content_validator``:

    <mcq question="..." subject="..." explanation="..." difficultyScore="7">
    <option correct="true">...</option>
    <option>...</option>
    </mcq>
"""

from html import escape

from .schemas import MCQ, MainsQuestion, MarkdownRendering, StructuredAnalysis


def _attr(value: str) -> str:
    return escape(value, quote=True).replace("\n", " ")


def render_mcq(mcq: MCQ) -> str:
    attrs = [f'question="{_attr(mcq.question)}"']
    if mcq.subject:
        attrs.append(f'subject="{_attr(mcq.subject)}"')
    if mcq.explanation:
        attrs.append(f'explanation="{_attr(mcq.explanation)}"')
    if mcq.difficulty is not None:
        attrs.append(f'difficultyScore="{mcq.difficulty}"')

    lines = [f"<mcq {' '.join(attrs)}>"]
    for option in mcq.options:
        text = escape(option.text, quote=False)
        if option.correct:
            lines.append(f'<option correct="true">{text}</option>')
        else:
            lines.append(f"<option>{text}</option>")
    lines.append("</mcq>")
    return "\n".join(lines)


def render_mains_question(index: int, question: MainsQuestion) -> str:
    heading = f"### Question {index}"
    if question.difficulty is not None:
        heading += f" (Difficulty {question.difficulty}/10)"
    parts = [heading, "", question.question]
    if question.guidance:
        parts += ["", "#### Guidance for Answer", "", question.guidance.strip()]
    return "\n".join(parts)


def render_mains_section(analysis: StructuredAnalysis) -> str:
    questions = analysis.mains_questions
    if not questions:
        return ""
    blocks = ["## Potential Mains Questions"]
    blocks += [render_mains_question(i, q) for i, q in enumerate(questions, start=1)]
    return "\n\n".join(blocks)


def render_markdown(analysis: StructuredAnalysis) -> MarkdownRendering:
    """Render ``analysis`` into the analysis, Mains and summary markdown parts."""
    sections: list[str] = []

    if analysis.syllabus_topic:
        sections.append(f"## Syllabus Topic\n\n**{analysis.syllabus_topic}**")
    if analysis.tags:
        sections.append("**Tags:** " + ", ".join(f"`{tag}`" for tag in analysis.tags))

    if analysis.prelims.mcqs:
        mcq_blocks = [render_mcq(mcq) for mcq in analysis.prelims.mcqs]
        sections.append("## Potential Prelims Questions\n\n" + "\n\n".join(mcq_blocks))

    mains_md = render_mains_section(analysis)
    if mains_md:
        sections.append(mains_md)

    return MarkdownRendering(
        analysis="\n\n".join(sections),
        mains_questions=mains_md,
        summary=(analysis.summary or "").strip(),
    )


__all__ = ["render_markdown", "render_mcq", "render_mains_section"]
