"""
Portfolio dataset.

Generated by the portfolio console export. Replace src/portfolio_data.py
with this file to make the current edits permanent.
"""

PORTFOLIO_DATA = {
  "name": "Mozza Rahman",
  "headline": "Data & Automation Engineer",
  "summary": "Engineer focused on turning messy operational data into reliable pipelines, dashboards and internal tools. Comfortable across the stack, from SQL modelling to small web frontends.",
  "profileImage": "/assets/profile.jpg",
  "contact": {
    "email": "hello@mozza.dev",
    "phone": "+60 12-345 6789",
    "linkedin": "https://www.linkedin.com/in/mozza-rahman",
    "location": "Kuala Lumpur, Malaysia"
  },
  "education": [
    {
      "institution": "Universiti Teknologi Malaysia",
      "major": "B.Eng. Computer Engineering",
      "period": "2015 - 2019",
      "details": [
        "Final year project on sensor data fusion for traffic monitoring",
        "Dean's list, four semesters"
      ]
    }
  ],
  "experience": [
    {
      "role": "Senior Data Engineer",
      "company": "Lumen Logistics",
      "period": "2022 - Present",
      "location": "Kuala Lumpur",
      "type": "Professional",
      "achievements": [
        "Rebuilt the nightly shipment pipeline, cutting runtime from 4h to 35min",
        "Introduced data contracts between warehouse and finance teams",
        "Mentored three junior engineers"
      ]
    },
    {
      "role": "Software Engineer",
      "company": "Kedai Digital",
      "period": "2019 - 2022",
      "location": "Petaling Jaya",
      "type": "Professional",
      "achievements": [
        "Shipped the merchant onboarding portal used by 2,000+ sellers",
        "Automated monthly reconciliation reports"
      ]
    }
  ],
  "skills": [
    {
      "category": "Data",
      "items": [
        "SQL",
        "dbt",
        "Airflow",
        "Pandas"
      ]
    },
    {
      "category": "Engineering",
      "items": [
        "Python",
        "TypeScript",
        "Docker",
        "GitHub Actions"
      ]
    }
  ],
  "certifications": [
    {
      "title": "Google Cloud Professional Data Engineer",
      "issuer": "Google Cloud",
      "date": "2023",
      "details": "Design and operation of data processing systems on GCP"
    }
  ],
  "projects": [
    {
      "title": "Fleet Pulse",
      "description": "Real-time dashboard for delivery fleet utilisation built on streaming GPS events.",
      "year": "2024",
      "stack": [
        "Python",
        "Kafka",
        "PostgreSQL",
        "React"
      ],
      "impact": "Idle time reduced by 18% in the first quarter"
    },
    {
      "title": "Receipt Sorter",
      "description": "Small OCR tool that files expense receipts into the right ledger accounts.",
      "year": "2021",
      "stack": [
        "Python",
        "Tesseract"
      ]
    }
  ]
}
