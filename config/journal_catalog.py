"""Default journal catalog used to seed an empty database.

Scope texts are condensed from the journals' published aims & scope pages.
Override with CATALOG_SEED_FILE (JSON, CSV or Excel) for a different list.
"""

JOURNAL_CATALOG = [
    {
        "id": "ijfatigue",
        "name": "International Journal of Fatigue",
        "abbreviation": "Int J Fatigue",
        "publisher": "Elsevier",
        "impact_factor": 6.0,
        "scope": (
            "Materials fatigue and fracture: crack initiation and growth, cyclic deformation, "
            "fatigue life prediction, damage tolerance, fatigue of metals, polymers, composites "
            "and additively manufactured parts, and fatigue-aware design of engineering components."
        ),
        "subjects": ["Materials Science", "Mechanical Engineering", "Fatigue"],
        "open_access": False,
        "review_time": "8 weeks",
        "acceptance_rate": 0.25,
        "website": "https://www.sciencedirect.com/journal/international-journal-of-fatigue",
    },
    {
        "id": "acta-materialia",
        "name": "Acta Materialia",
        "abbreviation": "Acta Mater",
        "publisher": "Elsevier",
        "impact_factor": 9.4,
        "scope": (
            "Original research on the structure and properties of inorganic materials: "
            "microstructure, phase transformations, mechanical behaviour, and the relation "
            "between processing, structure and performance."
        ),
        "subjects": ["Materials Science", "Metallurgy"],
        "open_access": False,
        "review_time": "10 weeks",
        "acceptance_rate": 0.2,
        "website": "https://www.sciencedirect.com/journal/acta-materialia",
    },
    {
        "id": "jsp",
        "name": "Journal of Social Policy",
        "abbreviation": "J Soc Policy",
        "publisher": "Cambridge University Press",
        "impact_factor": 3.1,
        "scope": (
            "Social policy and welfare: the design, implementation and outcomes of welfare "
            "states, poverty and inequality, family, housing, health and labour market policy, "
            "and comparative analysis of social programmes."
        ),
        "subjects": ["Social Policy", "Sociology", "Public Administration"],
        "open_access": False,
        "review_time": "12 weeks",
        "acceptance_rate": 0.12,
        "website": "https://www.cambridge.org/core/journals/journal-of-social-policy",
    },
    {
        "id": "plos-one",
        "name": "PLOS ONE",
        "abbreviation": "PLoS One",
        "publisher": "Public Library of Science",
        "impact_factor": 2.9,
        "scope": (
            "Multidisciplinary journal publishing methodologically sound primary research "
            "across science, engineering, medicine and the related social sciences and humanities."
        ),
        "subjects": ["Multidisciplinary"],
        "open_access": True,
        "review_time": "6 weeks",
        "acceptance_rate": 0.47,
        "website": "https://journals.plos.org/plosone/",
    },
    {
        "id": "nature-communications",
        "name": "Nature Communications",
        "abbreviation": "Nat Commun",
        "publisher": "Springer Nature",
        "impact_factor": 14.7,
        "scope": (
            "High-quality research of significance to specialists across the biological, "
            "health, physical, chemical, Earth, social, mathematical, applied and engineering sciences."
        ),
        "subjects": ["Multidisciplinary"],
        "open_access": True,
        "review_time": "14 weeks",
        "acceptance_rate": 0.08,
        "website": "https://www.nature.com/ncomms/",
    },
    {
        "id": "jmlr",
        "name": "Journal of Machine Learning Research",
        "abbreviation": "JMLR",
        "publisher": "JMLR Inc.",
        "impact_factor": 4.3,
        "scope": (
            "Machine learning theory, algorithms and applications: statistical learning, "
            "deep learning, reinforcement learning, probabilistic models, optimization for "
            "learning, and open-source machine learning software."
        ),
        "subjects": ["Computer Science", "Machine Learning", "Statistics"],
        "open_access": True,
        "review_time": "16 weeks",
        "acceptance_rate": 0.15,
        "website": "https://www.jmlr.org/",
    },
    {
        "id": "bioinformatics",
        "name": "Bioinformatics",
        "abbreviation": "Bioinformatics",
        "publisher": "Oxford University Press",
        "impact_factor": 4.4,
        "scope": (
            "Computational biology and bioinformatics: genome analysis, sequence analysis, "
            "structural bioinformatics, gene expression, systems biology, data and text mining, "
            "and databases and ontologies for the life sciences."
        ),
        "subjects": ["Computational Biology", "Genomics", "Computer Science"],
        "open_access": True,
        "review_time": "6 weeks",
        "acceptance_rate": 0.2,
        "website": "https://academic.oup.com/bioinformatics",
    },
    {
        "id": "lancet-public-health",
        "name": "The Lancet Public Health",
        "abbreviation": "Lancet Public Health",
        "publisher": "Elsevier",
        "impact_factor": 25.4,
        "scope": (
            "Public health research and policy: epidemiology, health inequalities, prevention, "
            "health services and systems, and the social and environmental determinants of health."
        ),
        "subjects": ["Public Health", "Epidemiology", "Health Policy"],
        "open_access": True,
        "review_time": "10 weeks",
        "acceptance_rate": 0.05,
        "website": "https://www.thelancet.com/journals/lanpub/home",
    },
    {
        "id": "energy-policy",
        "name": "Energy Policy",
        "abbreviation": "Energy Policy",
        "publisher": "Elsevier",
        "impact_factor": 9.3,
        "scope": (
            "Economic, social, planning and environmental aspects of energy supply and use: "
            "energy markets and regulation, renewable energy deployment, energy security, "
            "and climate policy as it affects the energy sector."
        ),
        "subjects": ["Energy", "Economics", "Environmental Policy"],
        "open_access": False,
        "review_time": "9 weeks",
        "acceptance_rate": 0.18,
        "website": "https://www.sciencedirect.com/journal/energy-policy",
    },
    {
        "id": "ieee-tse",
        "name": "IEEE Transactions on Software Engineering",
        "abbreviation": "IEEE Trans Softw Eng",
        "publisher": "IEEE",
        "impact_factor": 6.5,
        "scope": (
            "Software engineering: requirements, design, construction, testing, verification, "
            "maintenance and evolution of software systems, empirical studies of software "
            "development, and software engineering tools and processes."
        ),
        "subjects": ["Computer Science", "Software Engineering"],
        "open_access": False,
        "review_time": "20 weeks",
        "acceptance_rate": 0.14,
        "website": "https://www.computer.org/csdl/journal/ts",
    },
    {
        "id": "composites-part-b",
        "name": "Composites Part B: Engineering",
        "abbreviation": "Compos B Eng",
        "publisher": "Elsevier",
        "impact_factor": 12.7,
        "scope": (
            "Engineering of composite materials: design, manufacture, mechanical testing, "
            "durability, damage and fatigue of fibre-reinforced and nanocomposite structures."
        ),
        "subjects": ["Materials Science", "Composites", "Mechanical Engineering"],
        "open_access": False,
        "review_time": "7 weeks",
        "acceptance_rate": 0.22,
        "website": "https://www.sciencedirect.com/journal/composites-part-b-engineering",
    },
    {
        "id": "jpam",
        "name": "Journal of Policy Analysis and Management",
        "abbreviation": "J Policy Anal Manage",
        "publisher": "Wiley",
        "impact_factor": 3.8,
        "scope": (
            "Public policy analysis and public management: program evaluation, causal inference "
            "for policy, education, labour, health and social welfare policy."
        ),
        "subjects": ["Public Policy", "Economics", "Social Policy"],
        "open_access": False,
        "review_time": "12 weeks",
        "acceptance_rate": 0.1,
        "website": "https://onlinelibrary.wiley.com/journal/15206688",
    },
]
