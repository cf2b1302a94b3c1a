"""Equipment-type detection workflow: prompt, classify, validate, resolve."""

import logging
import time
import uuid
from dataclasses import dataclass

from opik import opik_context, track

from application.prompting import build_user_prompt
from domain.errors import ParseError
from domain.schemas import DetectionResult, EquipmentDetails, VerificationStatus
from domain.taxonomy.keywords import KeywordRelevanceFilter
from domain.taxonomy.summary import Clock, ContextSummarizer
from domain.taxonomy.tree import TypeTree
from domain.taxonomy.validator import ClassificationValidator
from infrastructure.config.models import DetectionConfig
from infrastructure.observability.logging import get_log_context, request_context
from infrastructure.prompting.manager import PromptObj
from infrastructure.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)


@dataclass
class DetectionContext:
    """Long-lived collaborators shared by every detection request."""

    cfg: DetectionConfig
    tree: TypeTree
    adapter: ProviderAdapter
    system_prompt: PromptObj
    user_prompt: PromptObj
    summarizer: ContextSummarizer
    keyword_filter: KeywordRelevanceFilter
    validator: ClassificationValidator


def build_detection_context(
    cfg: DetectionConfig,
    *,
    tree: TypeTree,
    adapter: ProviderAdapter,
    system_prompt: PromptObj,
    user_prompt: PromptObj,
    clock: Clock = time.monotonic,
) -> DetectionContext:
    return DetectionContext(
        cfg=cfg,
        tree=tree,
        adapter=adapter,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        summarizer=ContextSummarizer(tree, ttl_s=cfg.summary_ttl_s, clock=clock),
        keyword_filter=KeywordRelevanceFilter(cfg.keyword_categories),
        validator=ClassificationValidator(tree),
    )


@track(
    name="Equipment.detection",
    type="general",
    metadata={"task": "equipment_type_detection"},
)
def detect_equipment_type(
    ctx: DetectionContext,
    equipment: EquipmentDetails,
    *,
    request_id: str | None = None,
) -> DetectionResult:
    """
    Suggest an equipment type for ``equipment``.

    Classifier failures (transport errors, malformed output) never propagate:
    they are logged and turned into an "unavailable" result, since a suggestion
    is optional and manual selection always remains possible.

    Returns:
        DetectionResult with the validated (possibly partial) classification and
        the id of the deepest verified node
    """
    request_id = request_id or uuid.uuid4().hex[:12]
    with request_context(request_id):
        summary = ctx.summarizer.get_summary()
        keywords = ctx.keyword_filter.extract_keywords(equipment.text())
        relevant = ctx.keyword_filter.filter_relevant(ctx.tree, keywords)

        user_text = build_user_prompt(
            ctx.user_prompt,
            equipment=equipment,
            keywords=keywords,
            hierarchy_summary=summary,
            tree=ctx.tree,
            relevant=relevant,
        )

        opik_context.update_current_span(
            name=f"Equipment.detection.{ctx.cfg.provider.value}_{ctx.cfg.model}",
            metadata={
                "request_id": request_id,
                "keywords": keywords,
                "relevant_types": len(relevant),
                "json_mode": ctx.adapter.supports_json_mode,
            },
        )

        try:
            raw_text, usage = ctx.adapter.classify(
                system_text=ctx.system_prompt.prompt,
                user_text=user_text,
                request_id=request_id,
                extra_trace_meta=get_log_context(),
            )
            validated = ctx.validator.validate(raw_text)
        except ParseError:
            logger.exception("Classifier returned an unparseable response; falling back to manual selection")
            return DetectionResult.unavailable(keywords)
        except Exception:
            logger.exception("Equipment type detection failed; falling back to manual selection")
            return DetectionResult.unavailable(keywords)

        node_id = ctx.tree.resolve_id_from_path(validated.path)
        status = validated.status

        if status is VerificationStatus.PARTIALLY_VERIFIED:
            logger.warning(
                "Classifier path only partially verified: kept %d of %d levels (%s)",
                validated.depth,
                validated.proposed_depth,
                validated.path.display() or "-",
            )
        else:
            logger.info("Detection %s: %s", status.value, validated.path.display() or "-")

        return DetectionResult(
            classification=validated,
            node_id=node_id,
            status=status,
            keywords=keywords,
            usage=usage,
        )
