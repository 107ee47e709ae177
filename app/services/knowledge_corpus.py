"""Static site content indexed by the knowledge base.

One entry per service, FAQ answer, company section and contact card, in both
site languages. Entries are short enough that most become a single chunk.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

EntryType = Literal["services", "faq", "about", "contact"]

CONTACT = {
    "email": "contacto@vanguard-ia.tech",
    "phone": "+34 644 059 040",
    "city": "Barcelona",
}


@dataclass(frozen=True)
class KnowledgeEntry:
    type: EntryType
    language: str
    title: str
    text: str

    @property
    def source(self) -> str:
        return f"/{self.type}"


def _service(language: str, title: str, description: str, features: list[str]) -> KnowledgeEntry:
    label = "Features" if language == "en" else "Características"
    return KnowledgeEntry(
        type="services",
        language=language,
        title=title,
        text=f"{title}. {description} {label}: {', '.join(features)}.",
    )


def _faq(language: str, question: str, answer: str) -> KnowledgeEntry:
    title = "FAQ" if language == "en" else "Preguntas frecuentes"
    return KnowledgeEntry(
        type="faq",
        language=language,
        title=title,
        text=f"Q: {question} A: {answer}",
    )


def _about(language: str, title: str, text: str) -> KnowledgeEntry:
    return KnowledgeEntry(type="about", language=language, title=title, text=f"{title}. {text}")


_SERVICES = [
    _service(
        "en",
        "AI Development",
        "Leverage the power of artificial intelligence to optimize your business "
        "processes and gain competitive advantage.",
        [
            "AI Strategy Development",
            "Machine Learning Implementation",
            "Natural Language Processing",
            "Chatbots and Conversational AI Development",
            "AI Integration with Existing Systems",
        ],
    ),
    _service(
        "en",
        "AI-Powered CRM Solutions",
        "Strategic technology planning and implementation to align with your business goals.",
        [
            "Behavior Prediction",
            "Task Automation and Personalized Recommendations",
            "Automatic Analysis of Millions of Data Points",
            "Custom Reports",
            "RPA",
            "Intelligent Document Processing",
        ],
    ),
    _service(
        "en",
        "Web Branding",
        "Create a powerful online presence that reflects your brand's values and "
        "connects with your audience.",
        [
            "Brand Identity Development",
            "Website Design and Development",
            "User Experience Optimization",
            "Content Strategy",
            "SEO and Digital Marketing",
        ],
    ),
    _service(
        "en",
        "Web Development",
        "Comprehensive web development and design services to create cutting-edge "
        "digital experiences.",
        [
            "Custom Web Application Development",
            "Responsive Design",
            "Progressive Web Apps",
            "E-commerce Solutions",
            "Interactive User Interfaces",
        ],
    ),
    _service(
        "en",
        "Infrastructure Consulting Design",
        "Design and implement robust, scalable infrastructure for cloud, "
        "on-premises and hybrid environments.",
        ["Cloud Architecture", "Hybrid Infrastructure", "Scalability Planning", "Cost Optimization"],
    ),
    _service(
        "en",
        "Security",
        "Protect systems and data against evolving threats.",
        ["Security Assessments", "Threat Detection", "Data Protection", "Compliance"],
    ),
    _service(
        "es",
        "Desarrollo de IA",
        "Aprovecha el poder de la inteligencia artificial para optimizar los "
        "procesos de tu negocio y ganar ventaja competitiva.",
        [
            "Estrategia de IA",
            "Implementación de machine learning",
            "Procesamiento de lenguaje natural",
            "Chatbots e IA conversacional",
            "Integración de IA con sistemas existentes",
        ],
    ),
    _service(
        "es",
        "Soluciones CRM con IA",
        "Planificación e implementación tecnológica alineada con los objetivos de tu negocio.",
        [
            "Predicción de comportamiento",
            "Automatización de tareas y recomendaciones personalizadas",
            "Análisis automático de millones de datos",
            "Informes a medida",
            "RPA",
            "Procesamiento inteligente de documentos",
        ],
    ),
    _service(
        "es",
        "Branding web",
        "Crea una presencia online que refleje los valores de tu marca y conecte con tu audiencia.",
        [
            "Identidad de marca",
            "Diseño y desarrollo web",
            "Optimización de la experiencia de usuario",
            "Estrategia de contenidos",
            "SEO y marketing digital",
        ],
    ),
    _service(
        "es",
        "Desarrollo web",
        "Servicios integrales de desarrollo y diseño web para crear experiencias digitales punteras.",
        [
            "Aplicaciones web a medida",
            "Diseño responsive",
            "Progressive Web Apps",
            "Soluciones de e-commerce",
            "Interfaces interactivas",
        ],
    ),
    _service(
        "es",
        "Consultoría y diseño de infraestructura",
        "Diseñamos e implantamos infraestructura robusta y escalable en la nube, "
        "on-premises o híbrida.",
        ["Arquitectura cloud", "Infraestructura híbrida", "Planificación de escalado", "Optimización de costes"],
    ),
    _service(
        "es",
        "Seguridad",
        "Protege sistemas y datos frente a amenazas en evolución.",
        ["Auditorías de seguridad", "Detección de amenazas", "Protección de datos", "Cumplimiento normativo"],
    ),
]

_FAQ = [
    _faq(
        "en",
        "How long does a typical project take?",
        "Most engagements run between four and twelve weeks, depending on scope. "
        "We agree on milestones during the discovery phase.",
    ),
    _faq(
        "en",
        "Do you work with small businesses?",
        "Yes. We tailor proposals to companies of every size, from startups to "
        "large enterprises.",
    ),
    _faq(
        "en",
        "Do you offer support after launch?",
        "Every project includes a maintenance period, and ongoing support plans "
        "are available afterwards.",
    ),
    _faq(
        "es",
        "¿Cuánto dura un proyecto típico?",
        "La mayoría de proyectos dura entre cuatro y doce semanas, según el "
        "alcance. Acordamos los hitos durante la fase de descubrimiento.",
    ),
    _faq(
        "es",
        "¿Trabajáis con pequeñas empresas?",
        "Sí. Adaptamos las propuestas a empresas de cualquier tamaño, desde "
        "startups hasta grandes corporaciones.",
    ),
    _faq(
        "es",
        "¿Ofrecéis soporte después del lanzamiento?",
        "Todos los proyectos incluyen un periodo de mantenimiento y después hay "
        "planes de soporte continuo.",
    ),
]

_ABOUT = [
    _about(
        "en",
        "Our Mission",
        "At VANGUARD-IA, our mission is to empower businesses through innovative "
        "technology solutions that drive growth, efficiency, and competitive advantage.",
    ),
    _about(
        "en",
        "Our Vision",
        "To be the leading technology consultancy that transforms businesses through "
        "innovation, creativity, and strategic implementation of advanced technologies.",
    ),
    _about(
        "en",
        "Our Values",
        "Innovation, Excellence, Integrity, Collaboration and Client Focus guide "
        "every engagement.",
    ),
    _about(
        "en",
        "Our Approach",
        "Discover, Analyze, Strategize, Implement and Optimize: we start from your "
        "goals and keep refining the solution after delivery.",
    ),
    _about(
        "es",
        "Nuestra misión",
        "En VANGUARD-IA, nuestra misión es impulsar a las empresas con soluciones "
        "tecnológicas innovadoras que generan crecimiento, eficiencia y ventaja competitiva.",
    ),
    _about(
        "es",
        "Nuestra visión",
        "Ser la consultora tecnológica de referencia que transforma empresas mediante "
        "la innovación, la creatividad y la implantación estratégica de tecnologías avanzadas.",
    ),
    _about(
        "es",
        "Nuestros valores",
        "Innovación, excelencia, integridad, colaboración y foco en el cliente guían "
        "cada proyecto.",
    ),
    _about(
        "es",
        "Nuestro enfoque",
        "Descubrir, analizar, diseñar la estrategia, implementar y optimizar: partimos "
        "de tus objetivos y seguimos mejorando la solución tras la entrega.",
    ),
]

_CONTACT = [
    KnowledgeEntry(
        type="contact",
        language="en",
        title="Contact Information",
        text=(
            f"Contact Information. Email: {CONTACT['email']}. Phone: {CONTACT['phone']}. "
            f"Location: {CONTACT['city']}, Spain."
        ),
    ),
    KnowledgeEntry(
        type="contact",
        language="es",
        title="Información de Contacto",
        text=(
            f"Información de Contacto. Email: {CONTACT['email']}. Teléfono: {CONTACT['phone']}. "
            f"Ubicación: {CONTACT['city']}, España."
        ),
    ),
]

DEFAULT_ENTRIES: tuple[KnowledgeEntry, ...] = (*_SERVICES, *_FAQ, *_ABOUT, *_CONTACT)
