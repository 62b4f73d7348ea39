"""
Retrieval-augmented generation core.

Modules: rag_orchestrator (RagOrchestrator, resolve_scope),
history_compressor (HistoryCompressor), rag_prompt (prompt templates).
The prompt module is imported by the provider boundary, so this package
does not re-export the orchestrator or compressor.
"""
