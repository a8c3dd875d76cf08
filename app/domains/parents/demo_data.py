from typing import List

from app.domains.parents.models import Identity

DEMO_PARENTS = [
    {
        "name": "राजेश कुमार",
        "mobile": "9876543210",
        "children": [
            {
                "dsid": "DSID240156",
                "name": "आर्यन कुमार",
                "class": "7",
                "rollNumber": "156",
                "admissionId": "ADM2024156",
                "dob": "2010-05-15",
                "gender": "male",
                "bloodGroup": "B+",
                "address": "गांधी नगर, इंदौर",
                "fatherName": "राजेश कुमार",
                "motherName": "सुनीता कुमार",
                "status": "active",
                "lastAttendance": "2024-01-15",
                "feeStatus": "paid",
            },
            {
                "dsid": "DSID240157",
                "name": "प्रिया कुमार",
                "class": "6",
                "rollNumber": "157",
                "admissionId": "ADM2024157",
                "dob": "2011-08-22",
                "gender": "female",
                "bloodGroup": "A+",
                "address": "गांधी नगर, इंदौर",
                "fatherName": "राजेश कुमार",
                "motherName": "सुनीता कुमार",
                "status": "active",
                "lastAttendance": "2024-01-15",
                "feeStatus": "pending",
            },
        ],
    },
    {
        "name": "सुरेश शर्मा",
        "mobile": "9999999999",
        "children": [
            {
                "dsid": "DSID240158",
                "name": "अनिल शर्मा",
                "class": "8",
                "rollNumber": "158",
                "admissionId": "ADM2024158",
                "dob": "2009-12-10",
                "gender": "male",
                "bloodGroup": "O+",
                "address": "विजय नगर, इंदौर",
                "fatherName": "सुरेश शर्मा",
                "motherName": "गीता शर्मा",
                "status": "active",
                "lastAttendance": "2024-01-15",
                "feeStatus": "paid",
            }
        ],
    },
]


def demo_identities() -> List[Identity]:
    return [Identity.model_validate(parent) for parent in DEMO_PARENTS]
