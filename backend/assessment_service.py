# assessment_service.py
# Request orchestration: classify -> resolve CID -> fetch properties and
# record concurrently -> extract evidence -> score -> assemble the response

import logging
from concurrent.futures import ThreadPoolExecutor

from errors import CompoundNotFoundError, MalformedUpstreamDataError, UpstreamTransportError, UpstreamUnavailableError
from identifier_classifier import classify_identifier
from models import AssessmentResult, CompoundProperties
from pubchem_client import PubChemClient
from record_extractor import extract_chemical_info
from risk_scorer import calculate_risk

logger = logging.getLogger(__name__)


class EnvironmentalRiskService:
    """
    Builds one AssessmentResult per query. Keeps no state between calls;
    the only shared piece is the stateless PubChem client.
    """

    def __init__(self, client=None):
        self.client = client or PubChemClient()

    def assess(self, query):
        identifier = classify_identifier(query)
        logger.info(f"[Assessment] Received query: \"{identifier.raw}\", detected type: \"{identifier.kind}\"")

        cid = self.client.get_cid(identifier)
        if not cid:
            logger.error(f"[Assessment] CID not found for query: \"{identifier.raw}\" (type: {identifier.kind})")
            raise CompoundNotFoundError(identifier.raw, identifier.kind)

        properties, sections = self.fetch_compound_data(cid)

        extracted = extract_chemical_info(sections)
        if extracted.found_iupac_name and not properties.iupac_name:
            logger.info(f"[Assessment] Using fallback IUPAC Name from PUG View: {extracted.found_iupac_name}")
            properties = properties.model_copy(update={"iupac_name": extracted.found_iupac_name})

        if properties.iupac_name:
            compound_name = properties.iupac_name
        elif extracted.synonyms:
            compound_name = extracted.synonyms[0]
        else:
            compound_name = f"Compound CID {cid}"

        risk = calculate_risk(properties, extracted.ghs, extracted.toxicity, extracted.environmental)

        return AssessmentResult(
            query=query,
            query_type=identifier.kind,
            cid=cid,
            compound_name=compound_name,
            risk=risk,
            properties=properties,
            ghs=extracted.ghs,
            toxicity=extracted.toxicity,
            environmental=extracted.environmental,
            synonyms=extracted.synonyms,
            description=extracted.description,
            pub_chem_url=self.client.record_url(cid),
        )

    def fetch_compound_data(self, cid):
        """
        Fetch properties and the PUG-View record side by side and apply the
        partial-failure policy. Returns (CompoundProperties, sections).
        """
        properties_error = None
        record_error = None

        with ThreadPoolExecutor(max_workers=2) as executor:
            properties_future = executor.submit(self.client.get_properties, cid)
            record_future = executor.submit(self.client.get_record_sections, cid)

            try:
                properties = properties_future.result()
            except UpstreamTransportError as e:
                properties_error = e
                properties = CompoundProperties()

            try:
                sections = record_future.result()
            except (UpstreamUnavailableError, MalformedUpstreamDataError) as e:
                record_error = e
                sections = []

        if properties_error is not None:
            if not sections:
                logger.error(f"[Assessment] Property fetch and PUG View fetch both unusable for CID {cid}")
                raise UpstreamUnavailableError(
                    "Failed to retrieve essential data from PubChem.",
                    details=properties_error.message,
                ) from properties_error
            logger.warning(f"[Assessment] Property fetch failed for CID {cid}; continuing with record data only")
        elif record_error is not None:
            if properties.is_empty():
                logger.error("[Assessment] Both property fetch and PUG View fetch failed. Cannot proceed.")
                raise record_error
            logger.warning(f"[Assessment] Proceeding with potentially incomplete data for CID {cid}")

        return properties, sections


def assess_environmental_risk(query):
    """Convenience function: run one assessment with a default client"""
    return EnvironmentalRiskService().assess(query)
