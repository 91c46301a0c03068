"""
Import restaurants and tables from CSV file
CSV format: restaurant_slug,restaurant_name,label,x_position,y_position
Example: harbour-grill,Harbour Grill,T1,40,60
"""

import csv
import sys
from app import app
from models import db, Restaurant, Table, ServiceRequest

REQUIRED_COLUMNS = ('restaurant_slug', 'restaurant_name', 'label')

def parse_position(value):
    value = (value or '').strip()
    return int(value) if value else None

def import_tables_from_csv(filename='tables.csv'):
    """Import tables from CSV file, creating restaurants as needed"""

    with app.app_context():
        try:
            with open(filename, 'r', encoding='utf-8') as file:
                reader = csv.DictReader(file)

                # Validate headers
                if not reader.fieldnames or any(column not in reader.fieldnames for column in REQUIRED_COLUMNS):
                    print(f"❌ Error: CSV must have columns {', '.join(REQUIRED_COLUMNS)}")
                    return False

                restaurants = {r.slug: r for r in Restaurant.query.all()}
                tables_added = []
                line_num = 1

                for row in reader:
                    line_num += 1
                    slug = row['restaurant_slug'].strip().lower()
                    name = row['restaurant_name'].strip()
                    label = row['label'].strip()

                    if not slug or not name or not label:
                        print(f"⚠️  Warning: Skipping incomplete row at line {line_num}")
                        continue

                    restaurant = restaurants.get(slug)
                    if not restaurant:
                        restaurant = Restaurant(slug=slug, name=name)
                        db.session.add(restaurant)
                        db.session.flush()
                        restaurants[slug] = restaurant

                    # Check if table already exists
                    existing = Table.query.filter_by(restaurant_id=restaurant.id, label=label).first()
                    if existing:
                        print(f"⚠️  Warning: Table {label} already exists for {slug}, skipping")
                        continue

                    try:
                        x_position = parse_position(row.get('x_position'))
                        y_position = parse_position(row.get('y_position'))
                    except ValueError:
                        print(f"⚠️  Warning: Invalid position at line {line_num}, skipping")
                        continue

                    table = Table(
                        restaurant_id=restaurant.id,
                        label=label,
                        x_position=x_position,
                        y_position=y_position
                    )
                    db.session.add(table)
                    db.session.flush()
                    tables_added.append((slug, label))

                if tables_added:
                    db.session.commit()
                    print(f"\n✅ Successfully imported {len(tables_added)} tables!")

                    # Show sample
                    print("\nSample tables:")
                    for slug, label in tables_added[:5]:
                        print(f"  /u/{slug}/{label}")

                    if len(tables_added) > 5:
                        print(f"  ... and {len(tables_added) - 5} more")

                    return True
                else:
                    db.session.rollback()
                    print("⚠️  No new tables to import")
                    return False

        except FileNotFoundError:
            print(f"❌ Error: File '{filename}' not found")
            print("\nCreate a CSV file with this format:")
            print("restaurant_slug,restaurant_name,label,x_position,y_position")
            print("harbour-grill,Harbour Grill,T1,40,60")
            return False

        except Exception as e:
            print(f"❌ Error: {str(e)}")
            db.session.rollback()
            return False

def show_table_stats():
    """Display current restaurant, table and request counts"""
    with app.app_context():
        restaurants = Restaurant.query.count()
        tables = Table.query.count()
        open_requests = ServiceRequest.query.filter(ServiceRequest.status.in_(['pending', 'in_progress'])).count()

        print("\n" + "="*50)
        print("TABLE STATISTICS")
        print("="*50)
        print(f"Restaurants:       {restaurants}")
        print(f"Tables:            {tables}")
        print(f"Open requests:     {open_requests}")
        print("="*50)

def create_sample_csv(filename='tables_sample.csv'):
    """Create a sample CSV file"""
    sample_data = [
        ['restaurant_slug', 'restaurant_name', 'label', 'x_position', 'y_position'],
        ['harbour-grill', 'Harbour Grill', 'T1', '40', '60'],
        ['harbour-grill', 'Harbour Grill', 'T2', '160', '60'],
        ['harbour-grill', 'Harbour Grill', 'T3', '280', '60'],
        ['harbour-grill', 'Harbour Grill', 'T4', '40', '180'],
        ['harbour-grill', 'Harbour Grill', 'T5', '160', '180']
    ]

    with open(filename, 'w', newline='', encoding='utf-8') as file:
        writer = csv.writer(file)
        writer.writerows(sample_data)

    print(f"✅ Created sample file: {filename}")
    print("Edit this file with your real floor plan, then run:")
    print(f"python import_tables.py {filename}")

if __name__ == '__main__':
    print("="*50)
    print("TABLE SERVICE - TABLE IMPORT UTILITY")
    print("="*50)
    print()

    # Check command line arguments
    if len(sys.argv) > 1:
        if sys.argv[1] == '--sample':
            create_sample_csv()
        elif sys.argv[1] == '--stats':
            show_table_stats()
        else:
            filename = sys.argv[1]
            print(f"Importing from: {filename}\n")
            if import_tables_from_csv(filename):
                show_table_stats()
    else:
        # Default: import from tables.csv
        print("Importing from: tables.csv\n")
        if import_tables_from_csv('tables.csv'):
            show_table_stats()
        else:
            print("\n💡 Need help?")
            print("  Create sample: python import_tables.py --sample")
            print("  Show stats:    python import_tables.py --stats")
            print("  Import file:   python import_tables.py your_file.csv")
