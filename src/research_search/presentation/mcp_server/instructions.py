"""
MCP Server Instructions - usage guide for AI agents.
"""

from __future__ import annotations

SERVER_INSTRUCTIONS = """
Research Search MCP Server - source discovery and grounded answers for a research assistant

═══════════════════════════════════════════════════════════════════════════════
🎯 Choosing a search mode
═══════════════════════════════════════════════════════════════════════════════

## 1️⃣ Quick question → search_web
───────────────────────────────────────────────────────────────────────────────
Single pass over general, academic, news and expert sources. Fast.
```
search_web(query="explain artificial intelligence", limit=10)
search_web(query="اشرح الذكاء الاصطناعي")
```

## 2️⃣ Report-style question → deep_research
───────────────────────────────────────────────────────────────────────────────
Seven source categories x up to 15 query variations, up to 50 ranked results.
Progress notifications are sent while it runs.
```
deep_research(query="renewable energy policy comparison between countries")
```

## 3️⃣ Reading sources → scan_content / scan_results
───────────────────────────────────────────────────────────────────────────────
Results start with scanStatus "pending". Scanning attaches up to 800
characters of content and sets "completed" (or "error").

## 4️⃣ Answering → generate_answer
───────────────────────────────────────────────────────────────────────────────
Pass the (optionally scanned) results back in. The answer follows the
language of the question. Use deep_research=true for long reports and
voice_input=true for three short spoken sentences.

═══════════════════════════════════════════════════════════════════════════════
📌 Notes
═══════════════════════════════════════════════════════════════════════════════
- Every result carries relevanceScore (15-100); lists are sorted by it.
- A failed search returns an empty result list, not an error.
- A failed answer returns an error message; retry or tell the user.
- load_more_results and suggest_refinements take the results already shown.
- analyze_query shows how a query was classified (language, intent, category).
"""
