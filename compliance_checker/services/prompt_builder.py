import json

from compliance_checker.schemas.compliance import RegulationProfile

#static, byte-identical on every call
#output schema below must stay in step with ComplianceReport / Finding
SYSTEM_PROMPT = """You are an expert legal compliance analyst specializing in international employment law.
Your task is to analyze employment contracts and evaluate their compliance with country-specific labor regulations.

ANALYSIS METHODOLOGY:
1. Read the employment contract thoroughly
2. Compare each clause against the provided country regulations
3. Identify specific compliance issues with precise references
4. Provide actionable recommendations for remediation

COMPLIANCE STATUS DEFINITIONS:
- COMPLIANT: The contract clause meets or exceeds the legal requirement
- NON_COMPLIANT: The contract violates the regulation or falls short of requirements
- PARTIALLY_COMPLIANT: The contract addresses the requirement but has minor gaps
- NOT_ADDRESSED: The contract does not mention this aspect (may or may not be required)

OUTPUT FORMAT:
You MUST respond with a valid JSON object following this exact structure:
{
  "overallScore": <number 0-100>,
  "overallStatus": "<COMPLIANT|PARTIALLY_COMPLIANT|NON_COMPLIANT>",
  "summary": "<2-3 sentence executive summary>",
  "findings": [
    {
      "category": "<regulation category>",
      "requirement": "<what the law requires>",
      "status": "<COMPLIANT|NON_COMPLIANT|PARTIALLY_COMPLIANT|NOT_ADDRESSED>",
      "contractClause": "<relevant text from contract or 'Not found'>",
      "analysis": "<detailed explanation>",
      "severity": "<HIGH|MEDIUM|LOW>",
      "recommendation": "<specific action to fix if non-compliant>"
    }
  ],
  "criticalIssues": ["<list of most severe violations>"],
  "positiveAspects": ["<list of well-handled compliance areas>"]
}"""


def build_user_prompt(document_text: str, profile: RegulationProfile) -> str:
    """
    renders the jurisdiction's regulations & the full contract text.
    the document is never truncated, an empty document goes through as is.
    """
    regulations_json = json.dumps(profile.regulations, indent=2, ensure_ascii=False)

    return f"""Please analyze the following employment contract for compliance with {profile.name} employment regulations.

=== COUNTRY REGULATIONS: {profile.name} ===
{regulations_json}

=== EMPLOYMENT CONTRACT TO ANALYZE ===
{document_text}

=== INSTRUCTIONS ===
1. Analyze the contract against EACH regulation category provided
2. Quote specific contract clauses when referencing findings
3. Be precise about what is compliant vs non-compliant
4. Provide the overall compliance score as a percentage (0-100)
5. Focus on legally significant issues, not formatting

Respond with the JSON analysis object as specified."""


def build_prompts(document_text: str, profile: RegulationProfile) -> tuple[str, str]:
    return SYSTEM_PROMPT, build_user_prompt(document_text, profile)
