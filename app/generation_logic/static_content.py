"""Canned artifact payloads returned by the simulated generators.

The content is fixed and never derived from the uploaded document. Payloads are
kept as plain camelCase dicts (the persisted wire shape) and validated into
fresh model instances on every call, so callers can never mutate the canned data.
"""

import copy
from typing import Any

from app.models.analysis_models import Artifact
from app.models.analysis_models import CourseSheet
from app.models.analysis_models import Quiz
from app.models.analysis_models import SlideOutline
from app.models.analysis_models import Suggestions
from app.models.analysis_models import Summary
from app.models.analysis_models import TPSheet
from app.models.common import CamelModel

BASE_OVERVIEW = "Analyse du contenu pédagogique réalisée avec succès."

SUGGESTIONS: dict[str, Any] = {
    "improvements": [
        "Ajoutez des exemples concrets et études de cas pour illustrer les concepts théoriques.",
        "Intégrez des activités interactives pour améliorer l'engagement des étudiants.",
        "Structurez le contenu avec des sections clairement définies et numérotées.",
        "Utilisez un langage plus accessible pour les concepts complexes.",
        "Ajoutez des visuels et diagrammes pour les sections théoriques.",
    ],
    "strengths": [
        "Excellente couverture des fondements théoriques du sujet.",
        "Organisation chronologique claire et logique.",
        "Références bibliographiques pertinentes et à jour.",
    ],
}

SUMMARY: dict[str, Any] = {
    "title": "Résumé structuré du cours",
    "sections": [
        {
            "title": "Introduction et concepts fondamentaux",
            "content": (
                "Ce cours présente les principes de base du sujet, en établissant le cadre théorique et historique "
                "nécessaire à la compréhension des concepts avancés qui suivent."
            ),
            "keyPoints": [
                "Origine et évolution historique du domaine",
                "Définitions des termes clés et taxonomie",
                "Présentation des auteurs et théoriciens principaux",
            ],
        },
        {
            "title": "Méthodologie et approches analytiques",
            "content": (
                "Cette section aborde les différentes méthodes d'analyse et approches pratiques pour appliquer "
                "les concepts théoriques dans des contextes réels."
            ),
            "keyPoints": [
                "Approches quantitatives vs qualitatives",
                "Méthodes de collecte de données",
                "Cadres d'analyse et interprétation des résultats",
            ],
        },
        {
            "title": "Applications et études de cas",
            "content": (
                "Illustrations pratiques des concepts à travers des exemples concrets et des études de cas tirées "
                "de la recherche actuelle et de l'industrie."
            ),
            "keyPoints": [
                "Étude de cas: Application dans le contexte industriel",
                "Exemples de réussite et d'échec",
                "Perspectives d'évolution et tendances futures",
            ],
        },
    ],
}

QUIZ: dict[str, Any] = {
    "title": "Quiz d'évaluation des connaissances",
    "questions": [
        {
            "question": "Quelle est la principale caractéristique qui distingue l'approche présentée dans ce cours?",
            "options": [
                "Son orientation vers la pratique plutôt que la théorie",
                "Sa méthode d'analyse quantitative exclusive",
                "Son intégration des perspectives historiques et contemporaines",
                "Son rejet des modèles traditionnels",
            ],
            "correctAnswer": 2,
            "explanation": (
                "L'approche du cours se distingue par son intégration des perspectives historiques et "
                "contemporaines, créant un cadre analytique complet."
            ),
        },
        {
            "question": (
                "Selon le cours, quel facteur est considéré comme le plus déterminant dans la réussite de "
                "l'application des concepts?"
            ),
            "options": [
                "Le niveau de formation des praticiens",
                "L'adaptation contextuelle des modèles",
                "L'utilisation d'outils technologiques avancés",
                "Le financement adéquat des projets",
            ],
            "correctAnswer": 1,
            "explanation": (
                "Le cours souligne que l'adaptation contextuelle des modèles théoriques est cruciale pour leur "
                "application réussie dans différents environnements."
            ),
        },
        {
            "question": "Quelle méthode d'analyse est recommandée pour les cas présentant une forte variabilité de données?",
            "options": [
                "L'analyse par régression linéaire",
                "L'analyse factorielle",
                "L'approche par étude de cas comparative",
                "L'analyse mixte combinant méthodes qualitatives et quantitatives",
            ],
            "correctAnswer": 3,
            "explanation": (
                "Le cours recommande une analyse mixte pour les cas à forte variabilité, permettant de capturer à "
                "la fois les tendances statistiques et les nuances contextuelles."
            ),
        },
        {
            "question": "Quel auteur est principalement cité comme ayant développé le cadre théorique central du cours?",
            "options": [
                "Thompson (2018)",
                "Garcia et Wong (2020)",
                "Leblanc (2019)",
                "Martins et al. (2017)",
            ],
            "correctAnswer": 0,
            "explanation": (
                "Le cadre théorique central du cours s'appuie principalement sur les travaux de Thompson (2018), "
                "qui a établi le paradigme analytique fondamental."
            ),
        },
        {
            "question": "Quelle est la limitation principale de l'approche présentée dans ce cours?",
            "options": [
                "Sa complexité de mise en œuvre dans les petites organisations",
                "Son manque de validation empirique",
                "Sa dépendance excessive aux outils numériques",
                "Son applicabilité limitée aux contextes occidentaux",
            ],
            "correctAnswer": 3,
            "explanation": (
                "Le cours reconnaît que l'approche présentée a une applicabilité limitée aux contextes occidentaux "
                "et nécessite des adaptations significatives pour d'autres contextes culturels."
            ),
        },
    ],
}

SLIDES: dict[str, Any] = {
    "title": "Plan de présentation proposé",
    "slides": [
        {
            "title": "Introduction et objectifs du cours",
            "content": "Présentation générale du sujet, des objectifs d'apprentissage et du plan du cours.",
            "bulletPoints": [
                "Contextualisation du sujet dans le domaine",
                "Objectifs pédagogiques et compétences visées",
                "Structure et organisation du cours",
            ],
            "visualSuggestion": "Carte mentale montrant les relations entre les différents modules du cours",
        },
        {
            "title": "Cadre conceptuel et fondements théoriques",
            "content": "Exposé des théories et concepts fondamentaux qui serviront de base à l'ensemble du cours.",
            "bulletPoints": [
                "Évolution historique des concepts clés",
                "Définitions et terminologie essentielle",
                "Modèles théoriques principaux",
            ],
            "visualSuggestion": "Chronologie illustrant l'évolution des concepts théoriques",
        },
        {
            "title": "Méthodologies et approches pratiques",
            "content": "Présentation des méthodologies et techniques d'application des concepts théoriques.",
            "bulletPoints": [
                "Méthodes d'analyse et cadres d'application",
                "Outils et techniques spécifiques",
                "Étapes du processus méthodologique",
            ],
            "visualSuggestion": "Diagramme de flux illustrant le processus méthodologique",
        },
        {
            "title": "Étude de cas : Application pratique",
            "content": "Analyse détaillée d'un cas concret illustrant l'application des concepts et méthodologies.",
            "bulletPoints": [
                "Contexte et problématique du cas",
                "Application des concepts théoriques",
                "Résultats obtenus et analyse critique",
            ],
            "visualSuggestion": "Images ou graphiques illustrant les résultats du cas étudié",
        },
        {
            "title": "Synthèse et perspectives",
            "content": "Récapitulation des points clés et ouverture sur les développements futurs du domaine.",
            "bulletPoints": [
                "Résumé des concepts essentiels",
                "Tendances actuelles et futures",
                "Ressources complémentaires pour approfondir",
            ],
            "visualSuggestion": "Infographie présentant les interconnexions entre les concepts clés du cours",
        },
    ],
}

COURSE_SHEET: dict[str, Any] = {
    "title": "Fiche de cours pour étudiants",
    "sections": [
        {
            "title": "Informations générales",
            "content": {
                "nomCours": "Introduction aux concepts fondamentaux",
                "objectifs": "Maîtriser les concepts de base et développer une compréhension critique du domaine",
                "prérequis": "Aucun prérequis spécifique, connaissances générales du domaine recommandées",
                "durée": "12 heures de cours + 6 heures de travaux dirigés",
            },
        },
        {
            "title": "Concepts clés",
            "content": [
                {
                    "concept": "Concept fondamental A",
                    "définition": "Définition concise et claire du concept A, expliquant son importance et ses applications.",
                    "exemples": [
                        "Exemple pratique illustrant l'application du concept A dans un contexte réel",
                        "Contre-exemple montrant les limites du concept",
                    ],
                },
                {
                    "concept": "Concept fondamental B",
                    "définition": "Définition concise et claire du concept B, expliquant son importance et ses applications.",
                    "exemples": [
                        "Exemple pratique illustrant l'application du concept B dans un contexte réel",
                        "Illustration des liens entre le concept B et d'autres notions du cours",
                    ],
                },
                {
                    "concept": "Concept fondamental C",
                    "définition": "Définition concise et claire du concept C, expliquant son importance et ses applications.",
                    "exemples": [
                        "Exemple pratique illustrant l'application du concept C dans un contexte réel",
                        "Cas d'étude simplifié démontrant l'utilité du concept",
                    ],
                },
            ],
        },
        {
            "title": "Méthodologie",
            "content": (
                "Description concise de la méthodologie présentée dans le cours, avec les étapes principales et "
                "les points d'attention."
            ),
        },
        {
            "title": "Références essentielles",
            "content": [
                "Thompson, J. (2018). Titre de l'ouvrage principal. Éditeur.",
                "Garcia, M. & Wong, P. (2020). Titre de l'article clé. Journal, 15(2), 123-145.",
                "Leblanc, S. (2019). Titre du chapitre pertinent. Dans Titre du livre (pp. 45-67). Éditeur.",
            ],
        },
    ],
}

TP_SHEET: dict[str, Any] = {
    "title": "Fiche de Travaux Pratiques",
    "metadata": {
        "duration": "3 heures",
        "level": "Licence 3 / Master 1",
        "prerequisites": "Avoir suivi les modules théoriques 1 et 2 du cours",
    },
    "sections": [
        {
            "title": "Objectifs pédagogiques",
            "content": [
                "Appliquer les concepts théoriques dans un contexte pratique",
                "Développer des compétences d'analyse critique et d'évaluation",
                "Maîtriser les outils et techniques spécifiques présentés en cours",
                "Renforcer la compréhension des méthodologies par l'expérimentation directe",
            ],
        },
        {
            "title": "Matériel nécessaire",
            "content": [
                "Ordinateur avec logiciel X installé (version 2.0 ou supérieure)",
                "Jeu de données fourni (disponible sur l'ENT)",
                "Documentation technique (distribuée en début de séance)",
                "Calculatrice scientifique (optionnelle)",
            ],
        },
        {
            "title": "Consignes et déroulement",
            "content": [
                {
                    "step": "Étape 1: Préparation et analyse préliminaire (30 min)",
                    "instructions": (
                        "Examinez le jeu de données fourni et identifiez les variables clés selon la méthodologie "
                        "présentée en cours. Réalisez une analyse descriptive préliminaire."
                    ),
                },
                {
                    "step": "Étape 2: Application de la méthode principale (1h)",
                    "instructions": (
                        "Appliquez la technique X aux données en suivant le protocole détaillé dans la documentation "
                        "technique. Documentez chaque étape de votre processus."
                    ),
                },
                {
                    "step": "Étape 3: Analyse des résultats (45 min)",
                    "instructions": (
                        "Interprétez les résultats obtenus en vous référant aux concepts théoriques du cours. "
                        "Identifiez les patterns et anomalies significatifs."
                    ),
                },
                {
                    "step": "Étape 4: Synthèse et préparation du rapport (45 min)",
                    "instructions": (
                        "Préparez une synthèse de votre démarche et de vos résultats. Formulez des conclusions "
                        "critiques et proposez des pistes d'amélioration."
                    ),
                },
            ],
        },
        {
            "title": "Questions d'approfondissement",
            "content": [
                "En quoi les résultats obtenus confirment-ils ou remettent-ils en question les modèles théoriques présentés en cours?",
                "Quelles sont les limites de la méthode appliquée dans ce contexte spécifique?",
                "Comment pourriez-vous adapter cette approche à un contexte différent (précisez lequel)?",
                "Proposez une amélioration méthodologique qui pourrait renforcer la validité des résultats.",
            ],
        },
        {
            "title": "Critères d'évaluation",
            "content": [
                "Rigueur méthodologique et respect du protocole (40%)",
                "Qualité de l'analyse et pertinence des interprétations (30%)",
                "Clarté de la présentation des résultats (15%)",
                "Profondeur de la réflexion critique (15%)",
            ],
        },
    ],
}

# artifact -> (model, canned payload)
CANNED_ARTIFACTS: dict[Artifact, tuple[type[CamelModel], dict[str, Any]]] = {
    Artifact.SUGGESTIONS: (Suggestions, SUGGESTIONS),
    Artifact.SUMMARY: (Summary, SUMMARY),
    Artifact.QUIZ: (Quiz, QUIZ),
    Artifact.SLIDES: (SlideOutline, SLIDES),
    Artifact.COURSE_SHEET: (CourseSheet, COURSE_SHEET),
    Artifact.TP_SHEET: (TPSheet, TP_SHEET),
}


def build_artifact(artifact: Artifact) -> CamelModel:
    """Return a fresh, validated copy of the canned payload for *artifact*."""
    model, payload = CANNED_ARTIFACTS[artifact]
    return model.model_validate(copy.deepcopy(payload))
