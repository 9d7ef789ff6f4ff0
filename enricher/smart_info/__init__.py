"""Smart info (object tags and CLIP embeddings) enrichment.

Usage:
    from enricher.smart_info.service import SmartInfoService

The service is normally built per job by
``enricher.queue.processor.build_smart_info_service``.
"""
