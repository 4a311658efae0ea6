"""
Prompt construction for answer generation.

Pure string builders; no I/O. The composer feeds their output to whatever
TextGenerator is configured.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from research_search.application.search.query_analyzer import detect_language
from research_search.domain.entities.query import Language, QueryComplexity
from research_search.domain.entities.result import SearchResult
from research_search.infrastructure.scanner.base import extract_domain

SYSTEM_PROMPT = """You are a professional AI research assistant with expertise across multiple domains. \
Your responses should be comprehensive, detailed, and authoritative.

CRITICAL INSTRUCTIONS:
1. LANGUAGE MATCHING: ALWAYS respond in the SAME LANGUAGE as the user's question. \
Arabic questions = Arabic responses. English questions = English responses.

2. RESPONSE LENGTH ADAPTATION:
   - Simple questions: Comprehensive 2-3 paragraph responses with detailed explanations
   - Medium complexity: 4-5 paragraphs with examples, context, and analysis
   - Complex topics: Extensive multi-section responses with thorough analysis and insights

3. PROFESSIONAL TONE:
   - Serious, authoritative, and informative
   - Use formal language and complete sentences
   - Provide evidence-based information
   - Include relevant statistics, facts, and expert insights
   - Make analytical observations and connections

4. WEB SEARCH INTEGRATION:
   - ALWAYS reference search results by website name and domain
   - Synthesize information from ALL provided sources
   - Cite specific domains and assess their credibility
   - Use search data to provide comprehensive, current information
   - Quote relevant statistics and findings from sources

5. CONVERSATION CONTEXT:
   - Reference previous messages when relevant
   - Build upon earlier topics
   - Maintain conversation flow and continuity

6. ARABIC RESPONSES:
   - Use natural, conversational Arabic
   - Include appropriate Arabic expressions
   - Match the user's dialect when possible
   - Maintain professional tone in Arabic responses

7. MARKDOWN FORMATTING:
   - Use **bold** for key concepts and important terms
   - Use ## for main sections and ### for subsections
   - Use bullet points for lists and key findings
   - Use > for important quotes from sources
   - Structure responses with clear headings and organization

Response format should be comprehensive, well-structured, and professionally written \
with extensive use of source material."""

HISTORY_TURNS = 6
HISTORY_CHARS = 200
CONTENT_EXCERPT_CHARS = 300
REASONING_SOURCES = 10
REASONING_SNIPPET_CHARS = 150
ANSWER_SOURCES = 5

QUESTION_WORDS = re.compile(r"\b(how|what|why|when|where|explain|describe|analyze|compare|discuss)\b", re.IGNORECASE)
COMPLEX_TERMS = re.compile(
    r"\b(analysis|research|detailed|comprehensive|in-depth|comparison|evaluation)\b", re.IGNORECASE
)


def detect_language_name(query: str) -> str:
    return "Arabic" if detect_language(query) is Language.ARABIC else "English"


def analyze_response_complexity(query: str) -> QueryComplexity:
    """
    How long the answer should be.

    Word-count based, unlike the character-length complexity of QueryAnalyzer:
    up to 3 words without a question word is simple, up to 8 words without
    an analysis term is medium, anything else complex.
    """
    words = len(query.split(" "))
    if words <= 3 and not QUESTION_WORDS.search(query):
        return QueryComplexity.SIMPLE
    if words <= 8 and not COMPLEX_TERMS.search(query):
        return QueryComplexity.MEDIUM
    return QueryComplexity.COMPLEX


def _mode_instructions(
    language: str,
    complexity: QueryComplexity,
    source_count: int,
    deep_research: bool,
    voice_input: bool,
) -> str:
    if deep_research:
        return (
            "DEEP RESEARCH INSTRUCTIONS:\n"
            f"- Generate a COMPREHENSIVE 5000+ word research document in {language}\n"
            f"- Use ALL {source_count} sources extensively with detailed citations\n"
            "- Structure with proper markdown formatting (# ## ### #### for headers)\n"
            "- Include multiple detailed sections with subsections\n"
            "- Provide extensive analysis, statistics, expert quotes, and insights\n"
            "- Reference specific websites, studies, and data points from sources\n"
            "- Create a thorough, academic-level research paper\n"
            "- Use proper markdown formatting throughout (bold, italic, lists, quotes)\n"
            "- Include introduction, multiple main sections, subsections, and conclusion\n"
            "- Ensure each section is detailed and comprehensive (500-800 words per section)\n"
            "- Cite sources throughout using website names and specific data\n"
            "- Make it publication-ready quality research\n\n"
        )
    if voice_input:
        return (
            "VOICE INPUT INSTRUCTIONS:\n"
            f"- Provide EXACTLY 3 SHORT sentences in {language}\n"
            "- Each sentence must be SIMPLE and CLEAR\n"
            "- NO complex explanations, bullet points, lists, or formatting\n"
            "- Use conversational tone perfect for audio listening\n"
            "- Answer directly and concisely\n"
            "- Avoid technical jargon and complex terms\n"
            "- MAXIMUM 3 sentences - no more, no less\n\n"
        )
    if complexity is QueryComplexity.SIMPLE:
        return (
            f"Instructions: Provide a COMPREHENSIVE response (2-3 detailed paragraphs) in {language} "
            "with professional tone and thorough explanations.\n\n"
        )
    if complexity is QueryComplexity.MEDIUM:
        return (
            f"Instructions: Provide a DETAILED response (4-5 paragraphs) in {language} "
            "with professional analysis, examples, and comprehensive coverage.\n\n"
        )
    return (
        f"Instructions: Provide an EXTENSIVE multi-section response in {language} "
        "with professional analysis, detailed insights, and comprehensive coverage.\n\n"
    )


def _final_instructions(language: str, deep_research: bool, voice_input: bool) -> str:
    lines = ["FINAL INSTRUCTIONS:", f"- RESPOND IN {language} ONLY!"]
    if voice_input:
        lines += [
            "- Keep response SHORT (1-2 sentences maximum)",
            "- Use SIMPLE, clear language",
            "- Make it suitable for audio listening",
            "- No complex formatting or lists",
        ]
    elif deep_research:
        lines += [
            "- Generate 5000+ words of comprehensive research",
            "- Use proper markdown formatting throughout",
            "- Reference ALL sources extensively",
            "- Create publication-quality research document",
            "- Include detailed analysis, statistics, and expert insights",
        ]
    else:
        lines += [
            "- Provide comprehensive, well-structured response",
            "- Use proper markdown formatting",
            "- Include relevant analysis and insights",
        ]
    return "\n".join(lines)


def build_context_prompt(
    query: str,
    search_mode: str = "web",
    history: Sequence[Mapping[str, str]] = (),
    results: Sequence[SearchResult] = (),
    deep_research: bool = False,
    voice_input: bool = False,
) -> str:
    """
    Full answer prompt: language lock, length guidance, sources, history.

    Args:
        query: The user's question
        search_mode: Free-form mode label (e.g. "web")
        history: Prior turns as ``{"role": ..., "content": ...}``; last six used
        results: Search results to cite; scanned content is excerpted
        deep_research: Ask for a long research document
        voice_input: Ask for three short spoken sentences
    """
    language = detect_language_name(query)
    complexity = analyze_response_complexity(query)

    parts = [
        f"CRITICAL: Respond in {language} language only!\n\n",
        f"Query Complexity: {complexity.value}\n",
        f"Search Mode: {search_mode.upper()}\n\n",
        f"Research Type: {'DEEP RESEARCH' if deep_research else 'STANDARD SEARCH'}\n",
        f"Input Method: {'VOICE INPUT' if voice_input else 'TEXT INPUT'}\n\n",
        _mode_instructions(language, complexity, len(results), deep_research, voice_input),
    ]

    if results:
        parts.append(f"COMPREHENSIVE SOURCE DATABASE ({len(results)} sources - MUST use ALL extensively):\n")
        for index, result in enumerate(results, start=1):
            parts.append(f"{index}. Website: {result.title}\n")
            parts.append(f"   URL: {result.url}\n")
            parts.append(f"   Domain: {extract_domain(result.url)}\n")
            parts.append(f"   Snippet: {result.snippet}\n")
            if result.content:
                parts.append(f"   Content: {result.content[:CONTENT_EXCERPT_CHARS]}...\n")
            parts.append("\n")
        parts.append(
            "CRITICAL REQUIREMENTS:\n"
            f"- Reference ALL {len(results)} sources by name throughout the document\n"
            "- Quote specific data, statistics, and insights from each source\n"
            "- Synthesize information from academic, news, industry, and expert sources\n"
            "- Create comprehensive analysis using ALL available information\n"
            "- Use proper markdown formatting for all content\n"
            "- Generate 5000+ words of detailed, research-quality content\n\n"
        )

    if history:
        parts.append("Conversation Context (use for continuity):\n")
        for message in list(history)[-HISTORY_TURNS:]:
            content = message.get("content", "")
            suffix = "..." if len(content) > HISTORY_CHARS else ""
            parts.append(f"{message.get('role', 'user')}: {content[:HISTORY_CHARS]}{suffix}\n")
        parts.append("\n")

    parts.append(f"User Question (in {language}): {query}\n\n")
    parts.append(_final_instructions(language, deep_research, voice_input))
    return "".join(parts)


def build_reasoning_prompt(query: str, results: Sequence[SearchResult] = ()) -> str:
    """Prompt asking the model to explain how it approaches the question."""
    language = detect_language_name(query)

    parts = [
        f"CRITICAL: Respond in {language} language only!\n\n",
        "REASONING MODE INSTRUCTIONS:\n"
        "You are an AI assistant explaining your reasoning methodology. "
        "Provide a detailed explanation of:\n\n"
        "1. **Problem Analysis**: How you understand and break down the user's question\n"
        "2. **Information Processing**: How you analyze and synthesize available information\n"
        "3. **Source Evaluation**: How you assess the credibility and relevance of sources\n"
        "4. **Logic Framework**: The logical steps you follow to reach conclusions\n"
        "5. **Quality Assurance**: How you verify and validate your responses\n"
        "6. **Limitations**: What constraints or uncertainties exist in your analysis\n\n"
        "Structure your reasoning explanation with clear markdown formatting "
        "and be transparent about your methodology.\n\n",
    ]

    if results:
        parts.append(f"Available Sources for Analysis ({len(results)} sources):\n")
        for index, result in enumerate(results[:REASONING_SOURCES], start=1):
            parts.append(f"{index}. {result.title} ({extract_domain(result.url)})\n")
            parts.append(f"   Snippet: {result.snippet[:REASONING_SNIPPET_CHARS]}...\n\n")

    parts.append(f"User Question: {query}\n\n")
    parts.append(f"Please explain your reasoning methodology for approaching this question in {language}.")
    return "".join(parts)


def extract_sources(results: Sequence[SearchResult], limit: int = ANSWER_SOURCES) -> list[dict[str, Any]]:
    """Citation list returned alongside an answer."""
    return [{"title": r.title, "url": r.url, "snippet": r.snippet} for r in results[:limit]]
