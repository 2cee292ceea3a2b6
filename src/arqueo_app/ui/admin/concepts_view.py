from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from arqueo_client_sdk import CONCEPT_TYPE_LABELS, Concept

from arqueo_app.ui.admin.crud_panel import CrudPanel

CREATE_FIELDS = ("concept_name", "movement_type_association")


@dataclass
class ConceptsPanel(CrudPanel):
    entity: str = "concepts"
    id_field: str = "concept_id"
    title: str = "Conceptos"
    empty_message: str = "No hay conceptos registrados"
    created_message: str = "Concepto creado correctamente"
    updated_message: str = "Concepto actualizado correctamente"
    deleted_message: str = "Concepto eliminado correctamente"

    def create_payload(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        return {key: fields.get(key) for key in CREATE_FIELDS}

    def update_payload(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        payload = self.create_payload(fields)
        payload["is_active"] = bool(fields.get("is_active", True))
        return payload

    def type_options(self) -> list[dict[str, str]]:
        return [{"value": key, "label": label} for key, label in CONCEPT_TYPE_LABELS.items()]

    def project(self, record: Concept) -> dict[str, Any]:
        return {
            "concept_id": record.concept_id,
            "concept_name": record.concept_name,
            "type": record.type_label,
            "is_active": record.is_active,
            "created_by": record.creator.full_name if record.creator and record.creator.full_name else "",
        }
