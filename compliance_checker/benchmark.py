import asyncio
import logging
import os
import time

from compliance_checker.config import Settings
from compliance_checker.db import session as db_session
from compliance_checker.exceptions import ComplianceAnalysisError
from compliance_checker.services import country_service
from compliance_checker.services.compliance_analyzer import ComplianceAnalyzer
from compliance_checker.services.sample_service import list_sample_contracts

logger = logging.getLogger("BENCHMARK")

#filename hint -> overallStatus the model should land on
EXPECTED_STATUS = {
    "compliant": "COMPLIANT",
    "non_compliant": "NON_COMPLIANT",
    "partial": "PARTIALLY_COMPLIANT",
}


async def run_benchmark(settings: Settings) -> int:
    """
    runs every sample contract through the analyzer, returns the number of matches
    """
    db_session.init_db_connection(settings.database_url)
    session = db_session.SessionLocal()
    analyzer = ComplianceAnalyzer.from_settings(settings)
    matches = 0

    try:
        samples = list_sample_contracts(settings.sample_contracts_dir)
        print("\n STARTING COMPLIANCE BENCHMARK SUITE\n")

        for sample in samples:
            expected = EXPECTED_STATUS.get(sample.compliance_hint, "UNKNOWN")
            print(f"Running: {sample.description}")

            guide = country_service.get_country_guide(session, sample.target_country)
            if guide is None:
                print(f"    SKIPPED: no country guide for {sample.target_country}")
                continue

            path = os.path.join(settings.sample_contracts_dir, sample.filename)
            with open(path, "r", encoding="utf-8") as f:
                document_text = f.read()

            start_time = time.time()
            try:
                report = await analyzer.analyze(document_text, guide)
            except ComplianceAnalysisError as e:
                print(f"    RESULT: ERROR ({type(e).__name__}: {e})")
                continue
            duration = time.time() - start_time

            if report.overall_status == expected:
                matches += 1
                print(f"   RESULT: {report.overall_status} (Matches Expected) | Score: {report.overall_score} | Time: {duration:.2f}s")
            else:
                print(f"    RESULT: {report.overall_status} (Expected {expected}) | Score: {report.overall_score}")

            print(f"    Critical issues: {report.critical_issues}")
            print(f"    Summary Snippet: {report.summary[:100]}...")
            print("-" * 60 + "\n")

        print(f"{matches}/{len(samples)} samples matched their expected status")

    finally:
        session.close()
        await analyzer.client.close()

    return matches


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        asyncio.run(run_benchmark(Settings.from_env()))
    except Exception as e:
        logger.error(f'benchmark failed: {e}')
