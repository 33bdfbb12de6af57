from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Option:
    value: int
    label: str


@dataclass(frozen=True, slots=True)
class Question:
    index: int
    text: str
    options: tuple[Option, Option]

    @property
    def allowed_values(self) -> frozenset[int]:
        return frozenset(option.value for option in self.options)


@dataclass(frozen=True, slots=True)
class RiskBand:
    level: str
    low: int
    high: int


@dataclass(frozen=True, slots=True)
class Instrument:
    id: str
    name: str
    description: str
    audience: str
    questions: tuple[Question, ...]
    risk_bands: tuple[RiskBand, ...]

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def max_score(self) -> int:
        return sum(max(question.allowed_values) for question in self.questions)

    def question(self, index: int) -> Question:
        if index < 1 or index > len(self.questions):
            raise IndexError(f"Question {index} is outside 1..{len(self.questions)}.")
        return self.questions[index - 1]


@dataclass(frozen=True, slots=True)
class ScreeningTool:
    id: str
    name: str
    audience: str
    url: str
    in_app: bool


# On the CAST form a "No" answer scores one point.
YES_NO_OPTIONS = (Option(value=0, label="Yes"), Option(value=1, label="No"))

CAST_QUESTION_TEXTS = (
    "Does s/he join in playing games with other children easily?",
    "Does s/he come up to you spontaneously for a chat?",
    "Was s/he speaking by 2 years old?",
    "Does s/he enjoy sports?",
    "Is it important to him/her to fit in with the peer group?",
    "Does s/he appear to notice unusual details that others miss?",
    "Does s/he tend to take things literally?",
    "When s/he was 3 years old, did s/he spend a lot of time pretending (e.g., play-acting being a superhero, or holding teddy's tea parties)?",
    "Does s/he like to do things over and over again, in the same way all the time?",
    "Does s/he find it easy to interact with other children?",
    "Can s/he keep a two-way conversation going?",
    "Can s/he read appropriately for his/her age?",
    "Does s/he mostly have the same interests as his/her peers?",
    "Does s/he have an interest which takes up so much time that s/he does little else?",
    "Does s/he have friends, rather than just acquaintances?",
    "Does s/he often bring you things s/he is interested in to show you?",
    "Does s/he enjoy joking around?",
    "Does s/he have difficulty understanding the rules for polite behavior?",
    "Does s/he appear to have an unusual memory for details?",
    "Is his/her voice unusual (e.g., overly adult, flat, or very monotonous)?",
    "Are people important to him/her?",
    "Can s/he dress him/herself?",
    "Is s/he good at turn-taking in conversation?",
    "Does s/he play imaginatively with other children, and engage in role-play?",
    "Does s/he often do or say things that are tactless or socially inappropriate?",
    "Can s/he count to 50 without leaving out any numbers?",
    "Does s/he make normal eye-contact?",
    "Does s/he have any unusual and repetitive movements?",
    "Is his/her social behavior very one-sided and always on his/her own terms?",
    "Does s/he sometimes say “you” or “s/he” when s/he means “I”?",
    "Does s/he prefer imaginative activities such as play-acting or story-telling, rather than numbers or lists of facts?",
    "Does s/he sometimes lose the listener because of not explaining what s/he is talking about?",
    "Can s/he ride a bicycle (even if with stabilizers)?",
    "Does s/he try to impose routines on him/herself, or on others, in such a way that it causes problems?",
    "Does s/he care how s/he is perceived by the rest of the group?",
    "Does s/he often turn conversations to his/her favorite subject rather than following what the other person wants to talk about?",
    "Does s/he have odd or unusual phrases?",
    "Have teachers/health visitors ever expressed any concerns about his/her development?",
    "Has s/he ever been diagnosed with any of the following: Language delay, ADHD, hearing or visual difficulties, Autism Spectrum Condition (including Asperger’s Syndrome, or a physical disability?",
)

CAST_DISCLAIMER = (
    "This test is for children 4 and older. It is a simple test that can help you determine if your "
    "child may have autism. Please keep in mind that this test is not a substitute for an official "
    "diagnosis. Please seek a certified healthcare professional for an official diagnosis."
)

CAST = Instrument(
    id="cast",
    name="Childhood Autism Spectrum Test (CAST)",
    description=CAST_DISCLAIMER,
    audience="Children 4 and older",
    questions=tuple(
        Question(index=position, text=text, options=YES_NO_OPTIONS)
        for position, text in enumerate(CAST_QUESTION_TEXTS, start=1)
    ),
    risk_bands=(
        RiskBand(level="low", low=0, high=14),
        RiskBand(level="medium", low=15, high=31),
        RiskBand(level="high", low=32, high=39),
    ),
)

INSTRUMENTS: dict[str, Instrument] = {CAST.id: CAST}

SCREENING_TOOLS: tuple[ScreeningTool, ...] = (
    ScreeningTool(
        id="m-chat",
        name="M-CHAT: Modified Checklist for Autism in Toddlers",
        audience="Children 3 and under",
        url="https://www.autismspeaks.org/screen-your-child",
        in_app=False,
    ),
    ScreeningTool(
        id=CAST.id,
        name="CAST: Childhood Autism Spectrum Test",
        audience=CAST.audience,
        url=f"/screening/{CAST.id}",
        in_app=True,
    ),
    ScreeningTool(
        id="adult",
        name="Adult screening tests",
        audience="Adults",
        url="https://embrace-autism.com/autism-tests/",
        in_app=False,
    ),
)


def get_instrument(instrument_id: str) -> Instrument:
    try:
        return INSTRUMENTS[instrument_id.lower()]
    except KeyError:
        raise KeyError(f"Unknown screening instrument: {instrument_id}") from None
