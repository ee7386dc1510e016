"""Built-in starter issue used for "new newsletter" and first launch."""

from __future__ import annotations

from backend.ids import new_id
from backend.schemas.blocks import (
    ArticleComment,
    ArticleGridBlock,
    ArticleItem,
    Block,
    Contributor,
    EthicsSplitBlock,
    FooterBlock,
    HeaderBlock,
    HistoryBlock,
    HumorBlock,
    SbarPromptBlock,
    SbarStep,
    SectionDividerBlock,
    SpacerBlock,
    SpotlightBlock,
    TermOfMonthBlock,
    TickerBlock,
)
from backend.schemas.newsletter import Newsletter, NewsletterMeta, Row, RowLayout
from backend.services.themes import DEFAULT_PRESET, THEMES
from backend.time_utils import display_date, utc_now

NEWSLETTER_TITLE = "The Neurology AI Pulse"

_PROMPT_TEMPLATE = """\
Act as a [SPECIALTY] specialist.

Patient: [AGE] [SEX], [SETTING: inpatient/ED/outpatient]
Presentation: [CHIEF COMPLAINT] for [DURATION]
Key findings: [VITALS, EXAM FINDINGS, KEY LABS/IMAGING]
PMH: [COMORBIDITIES]
Medications: [MED LIST]

Task: [SPECIFIC QUESTION, e.g. "Generate a prioritised differential of the top 5 conditions"]
Format: [LIST / TABLE / SOAP NOTE / SUMMARY]
Evidence: [GUIDELINE, e.g. "Current AHA/ASA guidelines"]

Think step-by-step. Flag any recommendation where evidence is limited or where \
you are uncertain. Do not fabricate lab values, imaging findings, or drug doses. \
State your confidence level for each recommendation."""


def _starter_articles() -> list[ArticleItem]:
    now = utc_now()
    return [
        ArticleItem(
            id=new_id(),
            title="Retraining Machine Learning Models for Seizure Classification from EEG Data",
            source="Nature",
            url="https://www.nature.com",
            image_url="",
            summary=(
                "Retrained CNNs and LSTMs on the Temple University Hospital Seizure "
                "Detection Corpus exceed 90% seizure classification accuracy across "
                "more than 1,500 patients."
            ),
            clinical_review=(
                "Reaching >90% accuracy in busy EMU and ICU settings reduces cognitive "
                "load on neurologists and shortens time to treatment."
            ),
            my_view=(
                "AI that improves EEG screening throughput without replacing "
                "neurophysiologist judgment is the kind that changes practice."
            ),
            evidence_level="Moderate",
            comments=[
                ArticleComment(
                    id=new_id(),
                    author="Dr. Jai Shahani",
                    role="Attending Neurologist",
                    text=(
                        "Worth piloting in our EMU once the false positive rate on "
                        "artifacts is clarified."
                    ),
                    timestamp=now,
                )
            ],
        ),
        ArticleItem(
            id=new_id(),
            title="AI Reads Brain MRIs in Seconds and Flags Emergencies with 94.6% Accuracy",
            source="ScienceDaily",
            url="https://www.sciencedaily.com",
            image_url="",
            summary=(
                "A deep-learning tool trained on 14,000 scans flags hemorrhages and "
                "strokes on brain MRI in seconds with 94.6% accuracy."
            ),
            clinical_review=(
                "Automated prioritisation of acute findings can cut door-to-needle "
                "times in high-volume stroke centres."
            ),
            my_view=(
                "Integration with PACS and radiologist workflows, with clear "
                "human-in-the-loop protocols, is the real deployment challenge."
            ),
            evidence_level="High",
        ),
        ArticleItem(
            id=new_id(),
            title="RimeSleepNet: Hybrid Deep Learning for s-EEG Sleep Stage Classification",
            source="ScienceDirect",
            url="https://www.sciencedirect.com",
            image_url="",
            summary=(
                "A CNN and Bi-LSTM hybrid classifies sleep stages from "
                "stereoelectroencephalography with 86.4% accuracy in 16 epilepsy patients."
            ),
            clinical_review=(
                "Automated s-EEG staging could streamline presurgical epilepsy workflows."
            ),
            my_view="Promising, but multicenter validation is the essential next step.",
            evidence_level="Low",
        ),
        ArticleItem(
            id=new_id(),
            title="EEG Foundation Models Generalize Across Clinical Sites",
            source="Nature Medicine",
            url="https://www.nature.com/nm/",
            image_url="",
            summary=(
                "A transformer pre-trained on 100,000 EEG recordings detects seizures "
                "across sites without site-specific fine-tuning."
            ),
            clinical_review=(
                "Cross-site generalisability is a meaningful step toward ICU deployment."
            ),
            my_view=(
                "If it holds up prospectively, it changes the calculus for AI-assisted "
                "neurophysiology."
            ),
            evidence_level="High",
        ),
    ]


def _sbar_steps() -> list[SbarStep]:
    return [
        SbarStep(
            letter="S",
            name="Situation",
            description="Define your persona and state the clinical context clearly.",
            example='"Act as a Senior Neurologist. My patient is a 67F with subacute aphasia..."',
        ),
        SbarStep(
            letter="B",
            name="Background",
            description="Provide history, comorbidities, medications, and investigations.",
            example='"PMH: hypertension, AF on apixaban. MRI: FLAIR hyperintensity left MCA."',
        ),
        SbarStep(
            letter="A",
            name="Ask",
            description="Be explicit and verb-driven; request a specific format.",
            example='"Generate a prioritised differential of the top 5 causes."',
        ),
        SbarStep(
            letter="R",
            name="Role",
            description="Assign a clinical persona aligned with your question.",
            example='"Respond as a vascular neurologist preparing for a stroke MDT."',
        ),
        SbarStep(
            letter="P",
            name="Parameters",
            description="Set guardrails: evidence base, uncertainty disclosure, constraints.",
            example='"Use current AHA/ASA guidelines. Flag uncertainty. Think step-by-step."',
        ),
    ]


def create_default_newsletter() -> Newsletter:
    """Build the starter issue.

    Every call returns a new document with fresh ids and timestamps.
    """
    now = utc_now()
    year = str(now.year)

    blocks: list[Block] = [
        HeaderBlock(
            id=new_id(),
            title=NEWSLETTER_TITLE,
            subtitle="Artificial Intelligence in Clinical Neuroscience",
            issue_number="Issue 001",
            issue_date=display_date(now),
            tagline=(
                "Edited by Yasir El-Sherif MD, PhD & Jai Shahani MD · "
                "Staten Island University Hospital · Northwell Health"
            ),
        ),
        TickerBlock(
            id=new_id(),
            items=[
                "Nature Medicine: AI CT screening reaches 94.3% sensitivity across 47 RCTs",
                "AHA Class IIa: AI ECG now recommended for AF screening in adults 65+",
                "JAMA RCT: Ambient AI scribes reduce physician burnout 34% at 6 months",
                "FDA authorizes record 692 AI medical devices in 2024",
                "Northwell Neurology AI Symposium: Register Now",
            ],
            speed="medium",
        ),
        SectionDividerBlock(id=new_id(), label="TOP NEUROLOGY AI NEWS", style="gradient"),
        ArticleGridBlock(
            id=new_id(),
            section_title="This Week in Neurology AI",
            columns=2,
            articles=_starter_articles(),
        ),
        SpotlightBlock(
            id=new_id(),
            title="A Simple Twist Fooled AI and Revealed a Flaw in Medical Ethics Guardrails",
            source="ScienceDaily",
            url="https://www.sciencedaily.com",
            summary=(
                "Medical AI models can be manipulated with simple linguistic techniques "
                "into bypassing ethical guardrails and giving harmful advice."
            ),
            clinical_review=(
                "The vulnerability threatens non-maleficence and institutional trust in "
                "AI-augmented decision making."
            ),
            my_view=(
                "Adversarial robustness testing should be a precondition for clearance."
            ),
            evidence_level="Expert Opinion",
        ),
        SectionDividerBlock(id=new_id(), label="PERSPECTIVES & SKILLS", style="gradient"),
        EthicsSplitBlock(
            id=new_id(),
            topic="Algorithmic Bias in Neurology AI: Who Gets Left Behind?",
            issue=(
                "Most neurology AI models are trained on data from academic centres "
                "with known underrepresentation of Black, Hispanic, and rural populations."
            ),
            my_view=(
                "Regulators must require prospective demographic stratification of "
                "performance data before clearance."
            ),
        ),
        SbarPromptBlock(
            id=new_id(),
            title="Prompt Like a Rockstar: The SBAR-P Framework",
            intro=(
                "High-yield prompting begins with SBAR-P, adapted from clinical "
                "handover protocols."
            ),
            steps=_sbar_steps(),
            prompt_template=_PROMPT_TEMPLATE,
            safety_notes=[
                "Verify all outputs. AI can hallucinate drug doses, lab values, and guideline details.",
                "Never enter identifiable patient data into consumer AI tools.",
                "Clinical judgement remains paramount. AI is a decision support tool.",
                "Knowledge cutoffs matter. Verify against the current guideline version.",
            ],
        ),
        TermOfMonthBlock(
            id=new_id(),
            term="Foundation Model",
            definition=(
                "A large AI system trained on a vast, diverse dataset that serves as a "
                "versatile base for many downstream tasks."
            ),
            clinical_context=(
                "One vision foundation model trained on brain MRIs can flag strokes, mass "
                "effect, and hemorrhage instead of needing one algorithm per condition."
            ),
        ),
        HistoryBlock(
            id=new_id(),
            year="1950",
            title="The Dawn of AI: The Turing Test",
            content=(
                "In 1950 Alan Turing published Computing Machinery and Intelligence and "
                "proposed the Imitation Game as a practical test of machine intelligence."
            ),
        ),
        HumorBlock(
            id=new_id(),
            heading="Neural Network Humor",
            content=(
                'My AI dictation system transcribed "patient denies diplopia" as '
                '"patient denies diplopia, but suspects the government."'
            ),
            attribution="Submitted anonymously by a Northwell attending",
        ),
        SpacerBlock(id=new_id(), height=24),
        FooterBlock(
            id=new_id(),
            institution="Northwell Health",
            department="Department of Neurology · Staten Island University Hospital",
            contact_email="yelsheri@northwell.edu",
            unsubscribe_url="#",
            website_url="https://www.northwell.edu/neurology",
            copyright_year=year,
            disclaimer=(
                "This newsletter is for educational purposes only and does not "
                "constitute medical advice."
            ),
            socials=[],
            contributors=[
                Contributor(id=new_id(), name="Yasir El-Sherif, MD PhD", role="Editor-in-Chief", url=""),
                Contributor(id=new_id(), name="Jai Shahani, MD", role="Associate Editor", url=""),
            ],
        ),
    ]

    # Ethics + SBAR-P and term + history share two-column rows.
    grouping: list[tuple[RowLayout, int]] = [
        ("1col", 1),
        ("1col", 1),
        ("1col", 1),
        ("1col", 1),
        ("1col", 1),
        ("1col", 1),
        ("2col", 2),
        ("2col", 2),
        ("1col", 1),
        ("1col", 1),
        ("1col", 1),
    ]
    rows: list[Row] = []
    cursor = 0
    for layout, count in grouping:
        ids = [block.id for block in blocks[cursor : cursor + count]]
        rows.append(Row(id=new_id(), layout=layout, block_ids=ids))
        cursor += count

    return Newsletter(
        meta=NewsletterMeta(
            id=new_id(),
            title=NEWSLETTER_TITLE,
            issue_number="001",
            created_at=now,
            updated_at=now,
            version=1,
        ),
        theme=THEMES[DEFAULT_PRESET],
        rows=rows,
        blocks={block.id: block for block in blocks},
    )
