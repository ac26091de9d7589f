"""
Static lesson catalog.

Loaded once at import and shared read-only by every request.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, model_validator


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question_text: str
    options: Tuple[str, ...]
    correct_answer: str

    @model_validator(mode="after")
    def check_correct_answer(self) -> "QuizQuestion":
        if self.correct_answer not in self.options:
            raise ValueError(f"Question {self.id}: correct answer is not one of the options")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"Question {self.id}: duplicate options")
        return self


class Lesson(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    title: str
    description: str
    model_file: str
    definition: str
    questions: Tuple[QuizQuestion, ...] = ()

    @model_validator(mode="after")
    def check_question_ids(self) -> "Lesson":
        ids = [q.id for q in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Lesson {self.title}: question ids must be unique")
        return self

    def question(self, question_id: str) -> Optional[QuizQuestion]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


LESSONS: Tuple[Lesson, ...] = (
    Lesson(
        title="Human Brain",
        description=(
            "Delve into the intricate structures of the human brain, including its major lobes "
            "(frontal, parietal, temporal, occipital), the cerebellum, brainstem, and the microscopic "
            "world of neurons and synapses that enable complex thought and bodily control."
        ),
        model_file="human-brain.glb",
        definition=(
            "The human brain, the command center of the nervous system, orchestrates thought, memory, "
            "emotion, motor skills, vision, breathing, temperature, hunger, and every process that "
            "regulates our body. It comprises billions of neurons communicating through synapses."
        ),
        questions=(
            QuizQuestion(
                id="hb1",
                question_text="Which part of the brain is primarily responsible for higher cognitive functions like thinking and language?",
                options=("Cerebellum", "Brainstem", "Cerebrum", "Hypothalamus"),
                correct_answer="Cerebrum",
            ),
            QuizQuestion(
                id="hb2",
                question_text="What are the basic signaling units of the nervous system?",
                options=("Glial cells", "Neurons", "Axons", "Synapses"),
                correct_answer="Neurons",
            ),
            QuizQuestion(
                id="hb3",
                question_text="Which lobe is mainly involved in processing visual information?",
                options=("Frontal Lobe", "Temporal Lobe", "Parietal Lobe", "Occipital Lobe"),
                correct_answer="Occipital Lobe",
            ),
        ),
    ),
    Lesson(
        title="Lungs",
        description=(
            "Explore the respiratory pathway from the trachea to the bronchi and bronchioles, "
            "culminating in the alveoli where crucial oxygen and carbon dioxide exchange occurs. "
            "Understand the mechanics of breathing involving the diaphragm and intercostal muscles."
        ),
        model_file="lungs.glb",
        definition=(
            "The lungs are the central organs of the respiratory system in humans and many other "
            "animals. They are located in the chest cavity and are responsible for the vital process "
            "of gas exchange, extracting oxygen from inhaled air and releasing carbon dioxide from the "
            "bloodstream into exhaled air."
        ),
        questions=(
            QuizQuestion(
                id="lu1",
                question_text="What is the primary function of the lungs?",
                options=("Pumping blood", "Digesting food", "Gas exchange (Oxygen/CO2)", "Filtering waste"),
                correct_answer="Gas exchange (Oxygen/CO2)",
            ),
            QuizQuestion(
                id="lu2",
                question_text="What are the tiny air sacs in the lungs where gas exchange happens?",
                options=("Bronchi", "Trachea", "Alveoli", "Diaphragm"),
                correct_answer="Alveoli",
            ),
            QuizQuestion(
                id="lu3",
                question_text="Which large muscle below the lungs helps with breathing?",
                options=("Pectoralis Major", "Intercostal Muscles", "Diaphragm", "Trachea"),
                correct_answer="Diaphragm",
            ),
        ),
    ),
    Lesson(
        title="Amoeba",
        description=(
            "Discover the fascinating world of this single-celled protist. Learn about its unique mode "
            "of locomotion and feeding using pseudopods (phagocytosis), its simple structure including "
            "the nucleus and contractile vacuole, and its role in various ecosystems."
        ),
        model_file="amoeba.glb",
        definition=(
            "An amoeba is a type of single-celled organism belonging to the Protozoa group, "
            "characterized by its irregular shape and ability to move and capture food using temporary "
            "projections called pseudopods. They lack cell walls and are found in diverse environments "
            "like water and soil."
        ),
        questions=(
            QuizQuestion(
                id="am1",
                question_text="How does an amoeba primarily move?",
                options=("Flagella", "Cilia", "Pseudopods (false feet)", "Contractile vacuoles"),
                correct_answer="Pseudopods (false feet)",
            ),
            QuizQuestion(
                id="am2",
                question_text="Amoeba belong to which kingdom?",
                options=("Animalia", "Fungi", "Plantae", "Protista"),
                correct_answer="Protista",
            ),
            QuizQuestion(
                id="am3",
                question_text="What is the process by which an amoeba engulfs food particles?",
                options=("Photosynthesis", "Phagocytosis", "Osmosis", "Diffusion"),
                correct_answer="Phagocytosis",
            ),
        ),
    ),
)

_BY_TITLE: Dict[str, Lesson] = {lesson.title: lesson for lesson in LESSONS}

if len(_BY_TITLE) != len(LESSONS):
    raise ValueError("Lesson titles must be unique")


def list_lessons() -> List[Lesson]:
    return list(LESSONS)


def get_lesson(title: str) -> Optional[Lesson]:
    return _BY_TITLE.get(title)


def next_lesson(title: str) -> Optional[Lesson]:
    """The lesson after ``title`` in catalog order, or None for the last (or unknown) one."""
    for index, lesson in enumerate(LESSONS):
        if lesson.title == title:
            return LESSONS[index + 1] if index + 1 < len(LESSONS) else None
    return None
