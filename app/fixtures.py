"""Bundled sample records served when the backend errors or has no rows.

Rows are kept in the raw shapes the dashboard has always shipped with
(company_name / contact_person / location, deal_value, capitalised stages)
and go through services/entity_normalizer.py like any backend row.

Called by: services/entity_book.py (Workspace)
"""

from app.schemas.entities import EntityType

CLIENTS = [
    {
        "id": "client-001",
        "company_name": "MedTech Solutions Inc.",
        "contact_person": "Sarah Johnson",
        "email": "sarah.johnson@medtechsolutions.com",
        "phone": "+1-555-0123",
        "country": "United States",
        "industry": "pharmaceuticals",
        "status": "active",
        "notes": "Key client for cardiovascular medications. Prefers bulk orders with quarterly delivery schedules.",
        "created_at": "2024-01-15T08:30:00Z",
    },
    {
        "id": "client-002",
        "company_name": "Global Pharma Distribution",
        "contact_person": "Michael Chen",
        "email": "m.chen@globalpharma.com",
        "phone": "+1-555-0456",
        "country": "United States",
        "industry": "distribution",
        "status": "active",
        "notes": "Large distributor with extensive network. Requires FDA-approved suppliers only.",
        "created_at": "2024-02-20T10:15:00Z",
    },
    {
        "id": "client-003",
        "company_name": "BioResearch Labs",
        "contact_person": "Dr. Emily Rodriguez",
        "email": "e.rodriguez@bioresearch.com",
        "phone": "+1-555-0789",
        "country": "United States",
        "industry": "research",
        "status": "pending",
        "notes": "Specialized in oncology research. Requires high-purity compounds for clinical trials.",
        "created_at": "2024-03-10T14:45:00Z",
    },
    {
        "id": "client-004",
        "company_name": "Regional Health Network",
        "contact_person": "James Wilson",
        "email": "j.wilson@regionalhealthnet.com",
        "phone": "+1-555-0321",
        "country": "United States",
        "industry": "healthcare",
        "status": "active",
        "notes": "Multi-hospital network serving 500,000+ patients. Focus on generic medications and cost optimization.",
        "created_at": "2024-01-28T11:20:00Z",
    },
    {
        "id": "client-005",
        "company_name": "Specialty Therapeutics Corp",
        "contact_person": "Lisa Thompson",
        "email": "l.thompson@specialtytherapeutics.com",
        "phone": "+1-555-0654",
        "country": "United States",
        "industry": "biotechnology",
        "status": "inactive",
        "notes": "Focuses on rare disease treatments. Currently restructuring procurement processes.",
        "created_at": "2024-02-05T09:30:00Z",
    },
]

REQUIREMENTS = [
    {
        "id": "req-001",
        "client_id": "client-001",
        "product_name": "Atorvastatin Tablets",
        "api_name": "Atorvastatin Calcium",
        "dosage_form": "tablet",
        "strength": "20mg",
        "quantity": 100000,
        "unit": "pieces",
        "budget_usd": 15000,
        "deadline": "2024-12-15T00:00:00Z",
        "priority": "high",
        "status": "open",
        "notes": "USP grade required. Prefer blister packaging for retail distribution.",
        "created_at": "2024-09-15T10:30:00Z",
    },
    {
        "id": "req-002",
        "client_id": "client-001",
        "product_name": "Metformin Extended Release",
        "api_name": "Metformin Hydrochloride",
        "dosage_form": "tablet",
        "strength": "500mg",
        "quantity": 75000,
        "unit": "pieces",
        "budget_usd": 8500,
        "deadline": "2024-11-30T00:00:00Z",
        "priority": "medium",
        "status": "in_progress",
        "notes": "Extended release formulation. Stability data required for 24-month shelf life.",
        "created_at": "2024-09-10T14:20:00Z",
    },
    {
        "id": "req-003",
        "client_id": "client-002",
        "product_name": "Amoxicillin Capsules",
        "api_name": "Amoxicillin Trihydrate",
        "dosage_form": "capsule",
        "strength": "250mg",
        "quantity": 200000,
        "unit": "pieces",
        "budget_usd": 25000,
        "deadline": "2024-10-31T00:00:00Z",
        "priority": "high",
        "status": "open",
        "notes": "FDA-approved facility required. Need CoA and stability studies.",
        "created_at": "2024-09-18T09:15:00Z",
    },
    {
        "id": "req-004",
        "client_id": "client-003",
        "product_name": "Doxorubicin Injection",
        "api_name": "Doxorubicin Hydrochloride",
        "dosage_form": "injection",
        "strength": "50mg/25ml",
        "quantity": 500,
        "unit": "vials",
        "budget_usd": 45000,
        "deadline": "2024-11-15T00:00:00Z",
        "priority": "high",
        "status": "open",
        "notes": "GMP facility required. Cold chain storage and transport needed. For clinical trial use.",
        "created_at": "2024-09-20T16:45:00Z",
    },
    {
        "id": "req-005",
        "client_id": "client-004",
        "product_name": "Ibuprofen Tablets",
        "api_name": "Ibuprofen",
        "dosage_form": "tablet",
        "strength": "400mg",
        "quantity": 500000,
        "unit": "pieces",
        "budget_usd": 12000,
        "deadline": "2024-12-31T00:00:00Z",
        "priority": "low",
        "status": "open",
        "notes": "Generic formulation acceptable. Bulk packaging preferred for hospital use.",
        "created_at": "2024-09-12T13:30:00Z",
    },
]

SUPPLIERS = [
    {
        "id": "sup-001",
        "company_name": "PharmaCorp International",
        "contact_person": "Dr. Sarah Johnson",
        "email": "sarah.johnson@pharmacorp.com",
        "phone": "+1-555-0123",
        "location": "New York, USA",
        "status": "active",
        "website": "https://pharmacorp.com",
        "notes": "Leading supplier of cardiovascular medications",
        "created_at": "2024-01-15T10:30:00Z",
    },
    {
        "id": "sup-002",
        "company_name": "Global Meds Ltd",
        "contact_person": "Michael Chen",
        "email": "michael.chen@globalmeds.com",
        "phone": "+44-20-7123-4567",
        "location": "London, UK",
        "status": "active",
        "website": "https://globalmeds.com",
        "notes": "Specializes in generic pharmaceuticals",
        "created_at": "2024-02-20T14:15:00Z",
    },
    {
        "id": "sup-003",
        "company_name": "BioTech Solutions",
        "contact_person": "Dr. Priya Sharma",
        "email": "priya.sharma@biotech-sol.com",
        "phone": "+91-11-2345-6789",
        "location": "Mumbai, India",
        "status": "pending",
        "website": "https://biotech-solutions.com",
        "notes": "Emerging supplier with innovative drug delivery systems",
        "created_at": "2024-03-10T09:45:00Z",
    },
    {
        "id": "sup-004",
        "company_name": "European Pharma Group",
        "contact_person": "Hans Mueller",
        "email": "hans.mueller@europharma.de",
        "phone": "+49-30-1234-5678",
        "location": "Berlin, Germany",
        "status": "inactive",
        "website": "https://europharma.de",
        "notes": "Currently undergoing regulatory compliance review",
        "created_at": "2024-01-05T16:20:00Z",
    },
    {
        "id": "sup-005",
        "company_name": "MediSupply Australia",
        "contact_person": "Emma Thompson",
        "email": "emma.thompson@medisupply.au",
        "phone": "+61-2-9876-5432",
        "location": "Sydney, Australia",
        "status": "active",
        "website": "https://medisupply.com.au",
        "notes": "Regional distributor for Asia-Pacific markets",
        "created_at": "2024-02-28T11:10:00Z",
    },
]

PRODUCTS = [
    {
        "id": "prod-001",
        "supplier_id": "sup-001",
        "api_name": "Atorvastatin",
        "dosage_form": "tablet",
        "strength": "20mg",
        "pack_size": "10x10",
        "unit_price_usd": 0.45,
        "moq": 10000,
        "lead_time_days": 30,
        "description": "Cholesterol-lowering medication",
    },
    {
        "id": "prod-002",
        "supplier_id": "sup-001",
        "api_name": "Metformin",
        "dosage_form": "tablet",
        "strength": "500mg",
        "pack_size": "10x15",
        "unit_price_usd": 0.12,
        "moq": 50000,
        "lead_time_days": 25,
        "description": "Type 2 diabetes medication",
    },
    {
        "id": "prod-003",
        "supplier_id": "sup-001",
        "api_name": "Lisinopril",
        "dosage_form": "tablet",
        "strength": "10mg",
        "pack_size": "10x10",
        "unit_price_usd": 0.28,
        "moq": 25000,
        "lead_time_days": 35,
        "description": "ACE inhibitor for hypertension",
    },
    {
        "id": "prod-004",
        "supplier_id": "sup-002",
        "api_name": "Amoxicillin",
        "dosage_form": "capsule",
        "strength": "250mg",
        "pack_size": "10x10",
        "unit_price_usd": 0.18,
        "moq": 100000,
        "lead_time_days": 20,
        "description": "Broad-spectrum antibiotic",
    },
    {
        "id": "prod-005",
        "supplier_id": "sup-002",
        "api_name": "Paracetamol",
        "dosage_form": "tablet",
        "strength": "500mg",
        "pack_size": "10x20",
        "unit_price_usd": 0.08,
        "moq": 200000,
        "lead_time_days": 15,
        "description": "Pain reliever and fever reducer",
    },
    {
        "id": "prod-006",
        "supplier_id": "sup-003",
        "api_name": "Insulin Glargine",
        "dosage_form": "injection",
        "strength": "100IU/ml",
        "pack_size": "3ml cartridge",
        "unit_price_usd": 25.50,
        "moq": 1000,
        "lead_time_days": 45,
        "description": "Long-acting insulin for diabetes",
    },
]

DEALS = [
    {
        "id": "1",
        "client_name": "MedCorp Pharmaceuticals",
        "client_contact": "sarah.johnson@medcorp.com",
        "supplier_name": "Global Pharma Supply",
        "supplier_contact": "mike.chen@globalpharma.com",
        "product_name": "Amoxicillin",
        "dosage_form": "Capsule",
        "strength": "500mg",
        "pack_size": "100 capsules",
        "deal_value": 125000,
        "commission_rate": 0.05,
        "stage": "Negotiation",
        "priority": "High",
        "expected_close_date": "2025-01-15",
        "next_action": "Schedule pricing negotiation call",
        "notes": "Client interested in bulk pricing for Q1 2025",
        "created_at": "2024-12-01T10:00:00Z",
        "last_activity": "2024-12-20T14:30:00Z",
    },
    {
        "id": "2",
        "client_name": "HealthFirst Distribution",
        "client_contact": "david.wilson@healthfirst.com",
        "supplier_name": "BioMed Solutions",
        "supplier_contact": "lisa.martinez@biomed.com",
        "product_name": "Metformin",
        "dosage_form": "Tablet",
        "strength": "850mg",
        "pack_size": "500 tablets",
        "deal_value": 89000,
        "commission_rate": 0.04,
        "stage": "Contract",
        "priority": "Medium",
        "expected_close_date": "2025-01-10",
        "next_action": "Review final contract terms",
        "notes": "Contract under legal review, expecting signature next week",
        "created_at": "2024-11-15T09:00:00Z",
        "last_activity": "2024-12-21T11:15:00Z",
    },
    {
        "id": "3",
        "client_name": "Regional Medical Center",
        "client_contact": "jennifer.brown@rmc.org",
        "supplier_name": "PharmaTech Industries",
        "supplier_contact": "robert.davis@pharmatech.com",
        "product_name": "Lisinopril",
        "dosage_form": "Tablet",
        "strength": "10mg",
        "pack_size": "1000 tablets",
        "deal_value": 67500,
        "commission_rate": 0.06,
        "stage": "Closed",
        "priority": "Medium",
        "expected_close_date": "2024-12-15",
        "next_action": "Process purchase order",
        "notes": "Deal closed successfully, PO in progress",
        "created_at": "2024-10-20T08:30:00Z",
        "last_activity": "2024-12-15T16:45:00Z",
    },
]

FIXTURES: dict[EntityType, list[dict]] = {
    EntityType.CLIENT: CLIENTS,
    EntityType.REQUIREMENT: REQUIREMENTS,
    EntityType.SUPPLIER: SUPPLIERS,
    EntityType.PRODUCT: PRODUCTS,
    EntityType.DEAL: DEALS,
}
