"""CSV export of scored leads."""

import csv
from typing import TextIO

from leadscout.models import ScoredLead

CSV_HEADER = [
    "Rank",
    "Name",
    "General %",
    "Marketing %",
    "Website",
    "Website Status",
    "SSL",
    "Emails",
    "LinkedIn",
    "Phone",
    "Address",
    "Rating",
    "Reasons",
    "Error",
]


def write_leads_csv(leads: list[ScoredLead], stream: TextIO):
    """Write leads, in the given order, as CSV rows."""
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADER)

    for rank, lead in enumerate(leads, 1):
        candidate, enrichment, score = lead.candidate, lead.enrichment, lead.score
        writer.writerow([
            rank,
            candidate.name,
            score.general_percent,
            score.marketing_percent,
            enrichment.final_url or candidate.website_uri or "",
            enrichment.website_status.value,
            {True: "Yes", False: "No"}.get(enrichment.has_ssl, ""),
            "; ".join(enrichment.emails),
            enrichment.linkedin or "",
            candidate.national_phone_number or candidate.international_phone_number or "",
            candidate.formatted_address or "",
            "" if candidate.rating is None else candidate.rating,
            " | ".join(r.parameter for r in score.general_rationale + score.marketing_rationale),
            enrichment.error or "",
        ])
