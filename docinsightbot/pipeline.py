"""Document analysis pipeline as a LangGraph state machine.

extract -> augment -> compose -> invoke -> validate -> END
                                    |          |
                                    |          +-> fallback_parse (Tier 1) -> END
                                    +-> fallback_invocation (Tier 2) -> END

Blank documents never enter the graph and go straight to Tier 2. ``analyze`` never
raises: whatever happens inside the graph, the caller gets a complete
result and its metrics.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, TypedDict

from langgraph.graph import END, StateGraph

from .analysis.doc_types import get_document_type
from .analysis.fallback import invocation_failure_result, parse_failure_result
from .analysis.invoker import AnalysisInvoker
from .analysis.prompts import compose, truncate
from .analysis.schemas import AnalysisOutcome, AnalysisResult, DegradationTier, ProcessingMetrics, RawDocument
from .analysis.validator import Parsed, validate
from .augmentation.lookup import LLMOpportunityLookup, OpportunityLookup
from .augmentation.schemas import OpportunityRecord
from .augmentation.service import AugmentationConfig, AugmentationService
from .backend import BackendReply, OpenAIBackend, PromptPayload, ReasoningBackend
from .errors import InvocationError
from .extraction import ExtractedEntities, extract

logger = logging.getLogger(__name__)


# --- 1. Graph state ---
class PipelineState(TypedDict):
    text: str
    file_name: str
    document_type: str
    entities: Optional[ExtractedEntities]
    opportunities: List[OpportunityRecord]
    payload: Optional[PromptPayload]
    reply: Optional[BackendReply]
    result: Optional[AnalysisResult]
    tier: DegradationTier
    error: Optional[str]


@dataclass(frozen=True)
class PipelineConfig:
    augmentation: AugmentationConfig = field(default_factory=AugmentationConfig)
    verify_links: bool = False


def _initial_state(doc: RawDocument) -> PipelineState:
    return {
        "text": doc.text,
        "file_name": doc.file_name,
        "document_type": doc.document_type,
        "entities": None,
        "opportunities": [],
        "payload": None,
        "reply": None,
        "result": None,
        "tier": DegradationTier.NONE,
        "error": None,
    }


class DocumentAnalysisPipeline:
    """One instance serves any number of concurrent ``analyze`` calls.

    When a backend is given without a lookup, the opportunity lookup uses the
    same backend.
    """

    def __init__(
        self,
        backend: Optional[ReasoningBackend] = None,
        lookup: Optional[OpportunityLookup] = None,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.backend = backend or OpenAIBackend()
        if lookup is None:
            lookup = LLMOpportunityLookup(backend=backend, verify_links=self.config.verify_links)
        self.augmentation = AugmentationService(lookup=lookup, config=self.config.augmentation)
        self.invoker = AnalysisInvoker(self.backend)
        self.graph = self._build_graph()

    # --- 2. Nodes ---

    def extract_node(self, state: PipelineState) -> PipelineState:
        doc_type = get_document_type(state["document_type"])
        entities = extract(truncate(state["text"], doc_type.max_input_chars))
        logger.info(
            "Extracted entities from %s: institution=%r program=%r",
            state["file_name"] or "document",
            entities.institution_name,
            entities.program,
        )
        return {**state, "entities": entities}

    async def augment_node(self, state: PipelineState) -> PipelineState:
        opportunities = await self.augmentation.augment(state["entities"])
        return {**state, "opportunities": opportunities}

    def compose_node(self, state: PipelineState) -> PipelineState:
        payload = compose(state["text"], state["entities"], state["opportunities"], state["document_type"])
        return {**state, "payload": payload}

    async def invoke_node(self, state: PipelineState) -> PipelineState:
        try:
            reply = await self.invoker.invoke(state["payload"])
        except InvocationError as e:
            logger.warning("Analysis invocation failed: %s", e)
            return {**state, "tier": DegradationTier.INVOCATION_FAILURE, "error": str(e)}
        return {**state, "reply": reply}

    def validate_node(self, state: PipelineState) -> PipelineState:
        outcome = validate(state["reply"].text, state["entities"], state["opportunities"], state["document_type"])
        if isinstance(outcome, Parsed):
            return {**state, "result": outcome.result, "tier": DegradationTier.NONE}
        logger.warning("Analysis reply unusable (%s): %r", outcome.reason, outcome.snippet)
        return {**state, "tier": DegradationTier.PARSE_FAILURE, "error": outcome.reason}

    def fallback_parse_node(self, state: PipelineState) -> PipelineState:
        result = parse_failure_result(state["entities"], state["opportunities"], state["document_type"])
        return {**state, "result": result}

    def fallback_invocation_node(self, state: PipelineState) -> PipelineState:
        result = invocation_failure_result(state["document_type"])
        return {**state, "result": result, "reply": None}

    # --- 3. Routing ---

    @staticmethod
    def route_after_invoke(state: PipelineState) -> str:
        if state["tier"] == DegradationTier.INVOCATION_FAILURE:
            return "fallback_invocation"
        return "validate"

    @staticmethod
    def route_after_validate(state: PipelineState) -> str:
        return "fallback_parse" if state["tier"] == DegradationTier.PARSE_FAILURE else "done"

    def _build_graph(self):
        builder = StateGraph(PipelineState)

        builder.add_node("extract", self.extract_node)
        builder.add_node("augment", self.augment_node)
        builder.add_node("compose", self.compose_node)
        builder.add_node("invoke", self.invoke_node)
        builder.add_node("validate", self.validate_node)
        builder.add_node("fallback_parse", self.fallback_parse_node)
        builder.add_node("fallback_invocation", self.fallback_invocation_node)

        builder.set_entry_point("extract")

        builder.add_edge("extract", "augment")
        builder.add_edge("augment", "compose")
        builder.add_edge("compose", "invoke")
        builder.add_conditional_edges(
            "invoke",
            self.route_after_invoke,
            {"validate": "validate", "fallback_invocation": "fallback_invocation"},
        )
        builder.add_conditional_edges(
            "validate",
            self.route_after_validate,
            {"done": END, "fallback_parse": "fallback_parse"},
        )
        builder.add_edge("fallback_parse", END)
        builder.add_edge("fallback_invocation", END)

        return builder.compile()

    # --- 4. Entry point ---

    async def analyze(self, text: str, file_name: str = "", document_type: str = "offer_letter") -> AnalysisOutcome:
        started = time.monotonic()

        if not (text or "").strip():
            logger.warning("Empty document text for %s; returning generic result", file_name or "document")
            result = invocation_failure_result(document_type)
            return self._outcome(result, DegradationTier.INVOCATION_FAILURE, 0, started)

        try:
            doc = RawDocument(text=text, file_name=file_name or "", document_type=document_type)
            final = await self.graph.ainvoke(_initial_state(doc))
        except Exception:
            logger.exception("Analysis pipeline failed unexpectedly for %s", file_name or "document")
            result = invocation_failure_result(document_type)
            return self._outcome(result, DegradationTier.INVOCATION_FAILURE, 0, started)

        tier = final["tier"]
        reply = final["reply"]
        tokens = reply.tokens_used if reply is not None and tier != DegradationTier.INVOCATION_FAILURE else 0
        return self._outcome(final["result"], tier, tokens, started)

    @staticmethod
    def _outcome(result: AnalysisResult, tier: DegradationTier, tokens: int, started: float) -> AnalysisOutcome:
        elapsed_ms = max(0, int((time.monotonic() - started) * 1000))
        logger.info("Analysis finished: tier=%s tokens=%d time=%dms", tier.value, tokens, elapsed_ms)
        return AnalysisOutcome(
            result=result,
            metrics=ProcessingMetrics(tokens_used=max(0, tokens), processing_time_ms=elapsed_ms, degradation_tier=tier),
        )


async def analyze_document(
    text: str,
    file_name: str = "",
    document_type: str = "offer_letter",
    backend: Optional[ReasoningBackend] = None,
    lookup: Optional[OpportunityLookup] = None,
) -> AnalysisOutcome:
    """Run a single analysis with a fresh pipeline."""

    pipeline = DocumentAnalysisPipeline(backend=backend, lookup=lookup)
    return await pipeline.analyze(text, file_name=file_name, document_type=document_type)
